from datetime import UTC, datetime

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError as RedisClientError

from marketplace.constants import KC_SESSION_EXPIRY_BUFFER_SECONDS
from marketplace.exceptions import SessionLookupError
from marketplace.logging import logger
from marketplace.schemas.session import UserSessionModel
from marketplace.settings import app_settings
from marketplace.storage.redis import get_auth_redis_connection


class RedisSessionRepository:
    """
    Login sessions stored as JSON documents in the auth Redis database.

    Keys are ``USER_SESSION_REDIS_KEY_PREFIX + session_id`` and expire a
    little after the session itself, which lets the expiry watcher signal
    clients whose session ran out.
    """

    def __init__(self, redis: Redis | None = None) -> None:
        self._redis = redis

    @staticmethod
    def key(session_id: str) -> str:
        return app_settings.USER_SESSION_REDIS_KEY_PREFIX + session_id

    async def _get_redis(self) -> Redis:
        if self._redis is None:
            self._redis = await get_auth_redis_connection()
        if self._redis is None:
            raise SessionLookupError("Session store unavailable")
        return self._redis

    async def get_session(self, session_id: str) -> UserSessionModel | None:
        """
        Load a session.

        Returns:
            The session, or None if no such session is stored.

        Raises:
            SessionLookupError: Redis is unreachable or the stored document
                is not a valid session.
        """
        r = await self._get_redis()

        try:
            raw = await r.get(self.key(session_id))
        except (RedisClientError, OSError) as ex:
            logger.error(f"Failed to read session {session_id}: {ex}")
            raise SessionLookupError("Session store unavailable") from ex

        if raw is None:
            return None

        try:
            return UserSessionModel.model_validate_json(raw)
        except ValidationError as ex:
            logger.error(f"Stored session {session_id} is corrupt: {ex}")
            raise SessionLookupError("Stored session is corrupt") from ex

    async def save_session(self, session: UserSessionModel) -> None:
        r = await self._get_redis()

        remaining = (session.expires_at - datetime.now(UTC)).total_seconds()
        ttl_ms = int((remaining + KC_SESSION_EXPIRY_BUFFER_SECONDS) * 1000)

        await r.set(
            self.key(session.id),
            session.model_dump_json(),
            px=max(ttl_ms, 1),
        )
        logger.debug(f"Stored session {session.id} for user {session.user_id}")

    async def revoke_session(self, session_id: str) -> bool:
        """
        Mark a session as revoked, keeping its expiry.

        Returns:
            False if the session does not exist.
        """
        session = await self.get_session(session_id)
        if session is None:
            return False

        session.is_revoked = True
        r = await self._get_redis()
        await r.set(
            self.key(session_id), session.model_dump_json(), keepttl=True
        )
        logger.info(f"Session {session_id} revoked")
        return True

    async def delete_session(self, session_id: str) -> None:
        r = await self._get_redis()
        await r.delete(self.key(session_id))
