from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class NotificationType(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationCreateModel(BaseModel):
    """
    Inbound shape of a notification.

    ``to`` names the recipient user id; leave it empty to broadcast to
    every connected client.
    """

    type: NotificationType = NotificationType.INFO
    message: str = Field(..., min_length=1)
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    metadata_url: str | None = None
    is_high_priority: bool = False

    model_config = {"populate_by_name": True}


class NotificationModel(NotificationCreateModel):
    """A stored notification, as pushed to clients."""

    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_broadcast(self) -> bool:
        return not self.to

    def to_payload(self) -> dict:
        """JSON-ready payload with the public ``from`` key."""
        return self.model_dump(mode="json", by_alias=True)


class NotificationSeenModel(BaseModel):
    """Read receipt of one user for one notification."""

    id: str
    notification_id: str
    user_id: str
    seen_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
