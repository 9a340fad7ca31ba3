"""Notification model type definitions for database operations."""

from datetime import datetime
from typing import NotRequired, TypedDict


class NotificationCreate(TypedDict):
    """Data required to create an in-app notification."""

    recipient_id: str
    title: str
    message: str
    order_id: str | None


class Notification(NotificationCreate):
    """Notification table row representation."""

    id: str
    is_read: bool
    created_at: NotRequired[datetime | str]
