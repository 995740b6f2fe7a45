import uuid
from typing import Any

from starlette.websockets import WebSocket

from marketplace.api.ws.constants import ClientEvent, ConnectionState
from marketplace.schemas.response import ServerEventModel


class ClientConnection:
    """
    Handle for one live WebSocket connection.

    The endpoint that accepted the socket owns it; the connection registry
    only keeps references to handles. Handles compare and hash by identity,
    so the same socket is never mistaken for another one that happens to
    carry the same user or session.
    """

    def __init__(self, websocket: WebSocket, connection_id: str | None = None):
        self.websocket = websocket
        self.connection_id = connection_id or str(uuid.uuid4())
        self.state = ConnectionState.CONNECTING
        self.user_id: str | None = None
        self.session_id: str | None = None

    def __repr__(self) -> str:
        return (
            f"<ClientConnection {self.connection_id} state={self.state} "
            f"user={self.user_id} session={self.session_id}>"
        )

    @property
    def is_registered(self) -> bool:
        return self.state == ConnectionState.REGISTERED

    async def send_event(self, event: ClientEvent, data: Any = None) -> None:
        """
        Push one event frame to the client.

        Raises whatever the transport raises; callers fanning out to many
        connections decide how to isolate failures.
        """
        frame = ServerEventModel(event=event, data=data)
        await self.websocket.send_json(frame.model_dump(mode="json"))
