import uuid

from redis.asyncio import Redis

from marketplace.exceptions import RedisError
from marketplace.schemas.notification import (
    NotificationModel,
    NotificationSeenModel,
)
from marketplace.settings import app_settings
from marketplace.storage.redis import get_redis_connection


class RedisNotificationRepository:
    """
    Notification history kept in the main Redis database.

    Layout:
        notification:{id}            JSON document
        notifications:user:{user}    list of ids, newest first
        notifications:seen:{user}    set of ids the user has read

    Broadcast notifications are stored but not indexed per user.
    """

    def __init__(self, redis: Redis | None = None) -> None:
        self._redis = redis

    async def _get_redis(self) -> Redis:
        if self._redis is None:
            self._redis = await get_redis_connection()
        if self._redis is None:
            raise RedisError("Notification store unavailable")
        return self._redis

    @staticmethod
    def _key(notification_id: str) -> str:
        return app_settings.NOTIFICATION_REDIS_KEY_PREFIX + notification_id

    @staticmethod
    def _user_key(user_id: str) -> str:
        return app_settings.USER_NOTIFICATIONS_REDIS_KEY_PREFIX + user_id

    @staticmethod
    def _seen_key(user_id: str) -> str:
        return app_settings.SEEN_NOTIFICATIONS_REDIS_KEY_PREFIX + user_id

    async def create(self, notification: NotificationModel) -> NotificationModel:
        """
        Store a notification and index it for its recipient.

        Documents and indexes expire after ``NOTIFICATION_TTL_SECONDS``;
        a user's list keeps the newest ``NOTIFICATION_HISTORY_LIMIT`` ids.
        """
        r = await self._get_redis()
        ttl = app_settings.NOTIFICATION_TTL_SECONDS

        await r.set(
            self._key(notification.id), notification.model_dump_json(), ex=ttl
        )
        if notification.to:
            user_key = self._user_key(notification.to)
            await r.lpush(user_key, notification.id)
            await r.ltrim(
                user_key, 0, app_settings.NOTIFICATION_HISTORY_LIMIT - 1
            )
            await r.expire(user_key, ttl)
        return notification

    async def get(self, notification_id: str) -> NotificationModel | None:
        r = await self._get_redis()
        raw = await r.get(self._key(notification_id))
        if raw is None:
            return None
        return NotificationModel.model_validate_json(raw)

    async def list_for_user(self, user_id: str) -> list[NotificationModel]:
        r = await self._get_redis()
        ids = await r.lrange(self._user_key(user_id), 0, -1)
        if not ids:
            return []

        documents = await r.mget([self._key(i) for i in ids])
        return [
            NotificationModel.model_validate_json(doc)
            for doc in documents
            if doc is not None
        ]

    async def mark_seen(
        self, notification_id: str, user_id: str
    ) -> NotificationSeenModel:
        r = await self._get_redis()
        seen_key = self._seen_key(user_id)
        await r.sadd(seen_key, notification_id)
        await r.expire(seen_key, app_settings.NOTIFICATION_TTL_SECONDS)
        return NotificationSeenModel(
            id=uuid.uuid4().hex,
            notification_id=notification_id,
            user_id=user_id,
        )

    async def seen_ids(self, user_id: str) -> set[str]:
        r = await self._get_redis()
        return set(await r.smembers(self._seen_key(user_id)))

    async def delete(self, notification_id: str) -> bool:
        notification = await self.get(notification_id)
        if notification is None:
            return False

        r = await self._get_redis()
        await r.delete(self._key(notification_id))
        if notification.to:
            await r.lrem(self._user_key(notification.to), 0, notification_id)
            await r.srem(self._seen_key(notification.to), notification_id)
        return True
