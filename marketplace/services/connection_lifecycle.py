import uuid

from starlette import status
from starlette.websockets import WebSocketDisconnect

from marketplace.api.ws.connection import ClientConnection
from marketplace.api.ws.constants import ClientEvent, ConnectionState
from marketplace.constants import (
    MSG_INVALID_SESSION_FORMAT,
    MSG_SESSION_INVALID,
    MSG_SESSION_LOOKUP_FAILED,
    MSG_SESSION_NOT_IN_TOKEN,
    MSG_SESSION_REGISTERED,
    WS_POLICY_VIOLATION_CODE,
)
from marketplace.exceptions import SessionLookupError, SessionValidationError
from marketplace.logging import logger
from marketplace.managers.connection_registry import ConnectionRegistry
from marketplace.protocols import SessionLookup
from marketplace.schemas.session import UserSessionModel
from marketplace.utils.metrics import ws_connections_active, ws_connections_total


class ConnectionLifecycle:
    """
    Moves connections through VALIDATING, REGISTERED and DISCONNECTED.

    Validation reads the session from the session store; only a session
    that exists, is not revoked and has not expired lets the connection
    into the registry. Any other outcome sends one ``Error`` event and
    closes the socket.
    """

    def __init__(
        self, registry: ConnectionRegistry, sessions: SessionLookup
    ) -> None:
        self.registry = registry
        self.sessions = sessions

    async def validate(self, session_id: str | None) -> UserSessionModel:
        """
        Resolve ``session_id`` to a usable session.

        Raises:
            SessionValidationError: With the message to show the client.
        """
        if not session_id:
            raise SessionValidationError(
                MSG_SESSION_NOT_IN_TOKEN, "rejected_no_session"
            )

        # Only the canonical 8-4-4-4-12 form names a stored session key
        try:
            canonical = str(uuid.UUID(session_id)) == session_id.lower()
        except ValueError:
            canonical = False

        if not canonical:
            raise SessionValidationError(
                MSG_INVALID_SESSION_FORMAT, "rejected_format"
            )

        try:
            session = await self.sessions.get_session(session_id)
        except SessionLookupError as ex:
            logger.error(f"Session lookup for {session_id} failed: {ex}")
            raise SessionValidationError(
                MSG_SESSION_LOOKUP_FAILED, "rejected_lookup"
            )

        if session is None or not session.is_valid():
            raise SessionValidationError(
                MSG_SESSION_INVALID, "rejected_session"
            )

        return session

    async def register(
        self, connection: ClientConnection, session_id: str | None
    ) -> UserSessionModel | None:
        """
        Validate the session and record the connection in the registry.

        Used both right after the handshake and when a live connection asks
        to be re-registered. On success the session mapping is overwritten
        (last registration wins) and the client gets ``Registered``.

        Returns:
            The session on success, None if the connection was rejected
            and closed.
        """
        connection.state = ConnectionState.VALIDATING

        try:
            session = await self.validate(session_id)
        except SessionValidationError as ex:
            await self.reject(connection, ex.message, ex.reason)
            return None

        if connection.user_id and connection.user_id != session.user_id:
            self.registry.unregister_user_connection(connection)

        connection.user_id = session.user_id
        connection.session_id = session.id

        self.registry.register_user_connection(session.user_id, connection)
        superseded = self.registry.register_session_connection(
            session.id, connection
        )
        if superseded is not None:
            logger.info(
                f"Session {session.id} re-registered from connection "
                f"{superseded.connection_id}, previous connection stays open"
            )

        connection.state = ConnectionState.REGISTERED

        try:
            await connection.send_event(
                ClientEvent.REGISTERED, MSG_SESSION_REGISTERED
            )
        except Exception as ex:
            # Client went away while the session was being looked up
            logger.warning(
                f"Could not confirm registration to "
                f"{connection.connection_id}: {ex}"
            )
            ws_connections_total.labels(status="failed_confirm").inc()
            await self.close(connection, status.WS_1011_INTERNAL_ERROR)
            return None

        ws_connections_total.labels(status="registered").inc()
        self._update_active_gauge()
        logger.debug(
            f"Connection {connection.connection_id} registered for session "
            f"{session.id} of user {session.user_id}"
        )
        return session

    async def reject(
        self, connection: ClientConnection, message: str, reason: str
    ) -> None:
        """Send an ``Error`` event, then close the connection."""
        logger.info(
            f"Rejecting connection {connection.connection_id}: {message}"
        )
        ws_connections_total.labels(status=reason).inc()

        try:
            await connection.send_event(ClientEvent.ERROR, message)
        except Exception as ex:
            logger.debug(
                f"Could not deliver error to {connection.connection_id}: {ex}"
            )

        await self.close(connection, WS_POLICY_VIOLATION_CODE, message)

    async def close(
        self,
        connection: ClientConnection,
        code: int = status.WS_1000_NORMAL_CLOSURE,
        reason: str | None = None,
    ) -> None:
        """Forget the connection, then close its socket."""
        self.disconnect(connection)

        try:
            await connection.websocket.close(code=code, reason=reason)
        except (RuntimeError, OSError, WebSocketDisconnect) as ex:
            # Socket already closed by the peer
            logger.debug(
                f"Connection {connection.connection_id} already closed: {ex}"
            )

    def disconnect(self, connection: ClientConnection) -> None:
        """Remove every registry entry of ``connection``. Idempotent."""
        if connection.state == ConnectionState.DISCONNECTED:
            return

        self.registry.unregister(connection)
        connection.state = ConnectionState.DISCONNECTED
        self._update_active_gauge()

    def _update_active_gauge(self) -> None:
        ws_connections_active.set(self.registry.stats()["connections"])
