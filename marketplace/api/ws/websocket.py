import json
from typing import Any, Type

from starlette import status
from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from marketplace.api.ws.connection import ClientConnection
from marketplace.logging import clear_log_context, logger, set_log_context
from marketplace.middlewares.correlation_id import set_correlation_id
from marketplace.schemas.response import ResponseModel
from marketplace.schemas.user import UserModel
from marketplace.services.connection_lifecycle import ConnectionLifecycle


class PackagedWebSocket(WebSocket):  # type: ignore[misc]
    """Extended WebSocket class for sending packaged responses."""

    async def send_response(self, data: ResponseModel) -> None:
        """Serialize ``data`` (UUIDs and enums included) and send it as text."""
        await self.send_json(data.model_dump(mode="json"))


class SessionAuthWebSocketEndpoint(WebSocketEndpoint):  # type: ignore[misc]
    """
    WebSocket endpoint bound to the caller's login session.

    On connect the ``sid`` claim of the authenticated user is validated by
    the connection lifecycle; only a registered connection has its messages
    processed. The lifecycle and registry are read from ``app.state``.
    """

    encoding = None
    websocket_class: Type[WebSocket] = PackagedWebSocket

    connection: ClientConnection
    lifecycle: ConnectionLifecycle

    async def dispatch(self) -> None:
        """
        Run one connection from handshake to disconnect.

        Malformed frames close the socket with 1003; unexpected errors are
        re-raised after the connection is unregistered. Failures during
        ``on_connect`` go through the same cleanup.
        """
        websocket = self.websocket_class(
            self.scope, receive=self.receive, send=self.send
        )
        self.lifecycle = self.scope["app"].state.connection_lifecycle
        self.connection = ClientConnection(websocket)

        close_code = status.WS_1000_NORMAL_CLOSURE

        try:
            await self.on_connect(websocket)  # type: ignore[no-untyped-call]

            while websocket.application_state != WebSocketState.DISCONNECTED:
                message = await websocket.receive()
                if message["type"] == "websocket.receive":
                    data = await self.decode(websocket, message)
                    await self.on_receive(websocket, data)
                elif message["type"] == "websocket.disconnect":
                    close_code = int(
                        message.get("code") or status.WS_1000_NORMAL_CLOSURE
                    )
                    break
        except (ValueError, KeyError) as exc:
            # Malformed JSON or message envelope
            logger.debug(f"Unsupported data on websocket: {exc}")
            close_code = status.WS_1003_UNSUPPORTED_DATA
            await self.lifecycle.close(self.connection, close_code)
        except WebSocketDisconnect as exc:
            close_code = exc.code
        except Exception as exc:
            close_code = status.WS_1011_INTERNAL_ERROR
            raise exc
        finally:
            await self.on_disconnect(websocket, close_code)  # type: ignore[no-untyped-call]

    async def decode(
        self, websocket: WebSocket, message: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Decode an incoming text or binary frame as JSON.

        Raises:
            ValueError: The frame is not valid JSON.
        """
        if message.get("text") is not None:
            return json.loads(message["text"])

        return json.loads(message.get("bytes") or b"")

    async def on_connect(self, websocket):  # type: ignore[no-untyped-def]
        """
        Accept the socket and register it under the caller's session.

        The connection is rejected (``Error`` event, close 1008) when the
        token carries no session id or the session is unknown, revoked or
        expired.
        """
        await super().on_connect(websocket)

        # Keep correlation with the HTTP requests preceding the upgrade
        correlation_id = websocket.headers.get("x-correlation-id", "")
        set_correlation_id(
            correlation_id[:8]
            if correlation_id
            else self.connection.connection_id[:8]
        )

        user = self.scope.get("user")
        session_id = user.session_id if isinstance(user, UserModel) else None

        set_log_context(
            connection_id=self.connection.connection_id,
            session_id=session_id,
        )

        session = await self.lifecycle.register(self.connection, session_id)
        if session is not None:
            logger.debug(
                f"Client of user {session.user_id} connected "
                f"(connection_id: {self.connection.connection_id})"
            )

    async def on_disconnect(self, websocket, close_code):  # type: ignore[no-untyped-def]
        """Remove the connection from the registry."""
        await super().on_disconnect(websocket, close_code)

        self.lifecycle.disconnect(self.connection)
        logger.debug(
            f"Connection {self.connection.connection_id} of user "
            f"{self.connection.user_id} disconnected with code {close_code}"
        )
        clear_log_context()
