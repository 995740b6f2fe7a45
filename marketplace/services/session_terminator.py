from marketplace.api.ws.constants import ClientEvent
from marketplace.constants import MSG_SESSION_TERMINATED
from marketplace.logging import logger
from marketplace.managers.connection_registry import ConnectionRegistry
from marketplace.utils.metrics import force_logouts_total


class SessionTerminator:
    """
    Tells the connection of a session that the session is over.

    Only the ``ForceLogout`` signal is sent; closing the socket is left to
    the client reacting to it, or to the endpoint's own disconnect
    handling.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    async def force_logout(self, session_id: str) -> bool:
        """
        Send ``ForceLogout`` to the connection registered for ``session_id``.

        Returns:
            True if a signal was written, False if the session has no live
            connection or the write failed.
        """
        connection = self.registry.connection_for(session_id)
        if connection is None:
            logger.debug(f"No live connection for session {session_id}")
            force_logouts_total.labels(result="not_connected").inc()
            return False

        try:
            await connection.send_event(
                ClientEvent.FORCE_LOGOUT, MSG_SESSION_TERMINATED
            )
        except Exception as ex:
            logger.warning(
                f"Failed to send force logout for session {session_id} "
                f"to connection {connection.connection_id}: {ex}"
            )
            force_logouts_total.labels(result="failed").inc()
            return False

        logger.info(f"Force logout sent for session {session_id}")
        force_logouts_total.labels(result="signalled").inc()
        return True
