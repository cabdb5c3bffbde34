"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Categories of alerts stored in a user's inbox."""

    MESSAGE = "message"
    LISTING = "listing"
    BADGE = "badge"
    LIKE = "like"
    COMMENT = "comment"


class RelatedType(str, Enum):
    """Kinds of entities a notification can point back to."""

    MESSAGE = "Message"
    LISTING = "Listing"
    TEXTBOOK = "Textbook"
    NOTE = "Note"
    USER = "User"


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    type: NotificationType
    title: str
    message: str
    read: bool = False
    related_id: int | None = None
    related_type: RelatedType | None = None
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationType", "RelatedType"]
