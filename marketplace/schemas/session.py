from datetime import UTC, datetime
from enum import IntFlag

from pydantic import BaseModel, Field, field_validator


class BanType(IntFlag):
    """Features a banned account is locked out of."""

    NONE = 0
    COMMENTS = 1 << 1
    ORDERS = 1 << 2
    LOGIN = 1 << 3
    MESSAGING = 1 << 4


class DeviceInfoModel(BaseModel):
    """Client device a session was opened from."""

    ip: str = "Unknown"
    browser: str = "Unknown"
    os: str = "Unknown"
    device: str = "Other"
    country: str = "Unknown"
    city: str = "Unknown"


class UserSessionModel(BaseModel):
    """
    Server-side state of one login session.

    Stored in Redis under ``USER_SESSION_REDIS_KEY_PREFIX + id`` and
    returned by session lookups.
    """

    id: str
    user_id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    expires_at: datetime
    device_info: DeviceInfoModel = DeviceInfoModel()
    roles: list[str] = []
    banned: BanType = BanType.NONE
    banned_until: datetime | None = None
    is_revoked: bool = False

    @field_validator("created_at", "expires_at", "banned_until")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Timestamps stored without an offset are UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    def is_valid(self, now: datetime | None = None) -> bool:
        """A session is usable iff it is not revoked and not yet expired."""
        now = now or datetime.now(UTC)
        return not self.is_revoked and self.expires_at > now


class UserSessionResponse(BaseModel):
    """Session projection sent to clients asking for their session data."""

    id: str
    user_id: str
    created_at: datetime
    expires_at: datetime
    device_info: DeviceInfoModel
    roles: list[str]
    banned: BanType
    banned_until: datetime | None
    is_revoked: bool

    @classmethod
    def from_session(cls, session: UserSessionModel) -> "UserSessionResponse":
        return cls(**session.model_dump())
