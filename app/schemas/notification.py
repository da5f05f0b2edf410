"""In-app notification schemas."""
from datetime import datetime

from pydantic import Field

from app.models.notification import NotificationPriority, NotificationType
from app.schemas.base import CamelModel, Pagination, UTCDateTime


class NotificationCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    type: NotificationType = NotificationType.info
    recipient: int | None = None
    related_to: str | None = Field(default=None, max_length=50)
    related_id: int | None = None
    priority: NotificationPriority = NotificationPriority.medium
    action_url: str | None = Field(default=None, max_length=500)
    expires_at: datetime | None = None


class NotificationRead(CamelModel):
    id: int
    title: str
    message: str
    type: NotificationType
    recipient: int
    recipient_name: str | None
    related_to: str | None
    related_id: int | None
    is_read: bool
    read_at: UTCDateTime | None
    priority: NotificationPriority
    action_url: str | None
    expires_at: UTCDateTime | None
    created_at: UTCDateTime


class NotificationPage(CamelModel):
    data: list[NotificationRead]
    pagination: Pagination
    unread_count: int


class MarkAllReadResult(CamelModel):
    message: str = "All notifications marked as read"
    modified_count: int
