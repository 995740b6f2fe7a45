import time
from typing import Any

from fastapi import APIRouter
from pydantic import ValidationError
from starlette import status

from marketplace.api.ws.handlers import load_handlers
from marketplace.api.ws.websocket import SessionAuthWebSocketEndpoint
from marketplace.logging import logger
from marketplace.routing import pkg_router
from marketplace.schemas.request import RequestModel
from marketplace.utils.metrics import (
    ws_message_processing_duration_seconds,
    ws_messages_received_total,
    ws_messages_sent_total,
)

load_handlers()

router = APIRouter()


@router.websocket_route("/ws")
class Web(SessionAuthWebSocketEndpoint):
    """
    Realtime endpoint for marketplace clients.

    Receives session requests (``RequestModel``) and answers with
    ``ResponseModel`` frames; notifications and forced logouts are pushed
    to the same socket as event frames.
    """

    async def on_receive(self, websocket, data: dict[str, Any]):
        """
        Route one request and send back its response.

        Messages on connections that are not registered are ignored. Data
        that is not a valid ``RequestModel`` closes the connection with 1003.
        """
        if not self.connection.is_registered:
            logger.debug(
                f"Ignoring message on unregistered connection "
                f"{self.connection.connection_id}"
            )
            return

        ws_messages_received_total.inc()

        try:
            request = RequestModel(**data)
        except (ValidationError, TypeError):
            logger.debug(
                f"Received invalid data: {data} from user "
                f"{self.connection.user_id}"
            )
            await self.lifecycle.close(
                self.connection, status.WS_1003_UNSUPPORTED_DATA
            )
            return

        logger.debug(f"Received data: {data}")

        start_time = time.time()
        response = await pkg_router.handle_request(
            request, self.connection, self.lifecycle
        )
        duration = time.time() - start_time

        ws_message_processing_duration_seconds.labels(
            pkg_id=str(request.pkg_id)
        ).observe(duration)

        if response is None:
            return

        await websocket.send_response(response)
        ws_messages_sent_total.inc()
        logger.debug(f"Successfully sent response for {request.pkg_id}")
