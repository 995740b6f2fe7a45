import asyncio

from marketplace.api.ws.connection import ClientConnection
from marketplace.api.ws.constants import ClientEvent
from marketplace.constants import SYSTEM_SENDER
from marketplace.logging import logger
from marketplace.managers.connection_registry import ConnectionRegistry
from marketplace.schemas.notification import NotificationModel
from marketplace.utils.metrics import (
    notifications_delivered_total,
    notifications_dropped_total,
    notifications_failed_total,
)


class NotificationDispatcher:
    """
    Pushes notifications to live connections.

    A notification with ``to`` set goes to every connection of that user;
    without ``to`` it goes to every registered connection. Offline
    recipients are skipped, not queued.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    async def send_notification(self, notification: NotificationModel) -> int:
        """
        Deliver ``notification`` to its recipients.

        Delivery to each connection is independent: a failing connection is
        logged and skipped and never aborts the others.

        Args:
            notification: The notification to push.

        Returns:
            Number of connections the notification was written to.
        """
        if not notification.from_:
            notification.from_ = SYSTEM_SENDER

        if notification.is_broadcast:
            mode = "broadcast"
            connections = self.registry.all_connections()
            logger.debug(
                f"Broadcasting notification {notification.id} to "
                f"{len(connections)} connections"
            )
        else:
            mode = "targeted"
            connections = self.registry.connections_for(notification.to)
            if not connections:
                logger.debug(
                    f"User {notification.to} not connected, "
                    f"notification {notification.id} skipped"
                )
                notifications_dropped_total.inc()
                return 0

        payload = notification.to_payload()
        results = await asyncio.gather(
            *[self._safe_send(conn, payload) for conn in connections]
        )
        delivered = sum(results)

        if delivered:
            notifications_delivered_total.labels(mode=mode).inc(delivered)

        return delivered

    async def _safe_send(
        self, connection: ClientConnection, payload: dict
    ) -> bool:
        try:
            logger.info(
                f"Sending notification to {connection.connection_id}"
            )
            await connection.send_event(
                ClientEvent.RECEIVE_NOTIFICATION, payload
            )
            return True
        except Exception as ex:
            # The client may have gone away between snapshot and send
            logger.warning(
                f"Failed to send notification to connection "
                f"{connection.connection_id}: {ex}"
            )
            notifications_failed_total.inc()
            return False
