import uuid
from datetime import UTC, datetime

from marketplace.exceptions import NotFoundError
from marketplace.logging import logger
from marketplace.repositories.notification_repository import (
    RedisNotificationRepository,
)
from marketplace.schemas.notification import (
    NotificationCreateModel,
    NotificationModel,
    NotificationSeenModel,
)
from marketplace.services.notification_dispatcher import NotificationDispatcher


class NotificationService:
    """
    Stores notifications and hands them to the realtime dispatcher.

    Persisting happens first, so a recipient who is offline at send time
    can still list the notification later.
    """

    def __init__(
        self,
        repository: RedisNotificationRepository,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self.repository = repository
        self.dispatcher = dispatcher

    async def send_notification(
        self, data: NotificationCreateModel
    ) -> NotificationModel:
        notification = NotificationModel(
            **data.model_dump(),
            id=uuid.uuid4().hex,
            created_at=datetime.now(UTC),
        )
        await self.repository.create(notification)
        logger.info(f"Notification {notification.id} created")

        delivered = await self.dispatcher.send_notification(notification)
        logger.info(
            f"Notification {notification.id} delivered to {delivered} connections"
        )
        return notification

    async def get_notifications(self, user_id: str) -> list[NotificationModel]:
        return await self.repository.list_for_user(user_id)

    async def get_unseen_notifications(
        self, user_id: str
    ) -> list[NotificationModel]:
        notifications = await self.repository.list_for_user(user_id)
        seen = await self.repository.seen_ids(user_id)
        return [n for n in notifications if n.id not in seen]

    async def mark_seen(
        self, notification_id: str, user_id: str
    ) -> NotificationSeenModel:
        """
        Record that ``user_id`` has read a notification.

        Raises:
            NotFoundError: The notification does not exist.
        """
        if await self.repository.get(notification_id) is None:
            raise NotFoundError("Notification not found")
        return await self.repository.mark_seen(notification_id, user_id)

    async def delete_notification(self, notification_id: str) -> None:
        if not await self.repository.delete(notification_id):
            raise NotFoundError("Notification not found")
        logger.info(f"Notification {notification_id} deleted")
