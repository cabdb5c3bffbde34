"""Domain entity representing a direct message between two users."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .context import ContextRef


@dataclass
class Message:
    """Single message sent by ``sender_id`` to ``recipient_id`` about ``context``."""

    id: int | None
    sender_id: int
    recipient_id: int
    text: str
    context: ContextRef
    read: bool = False
    email_notification_sent: bool = False
    email_notification_sent_at: datetime | None = None
    created_at: datetime | None = None

    def is_addressed_to(self, user_id: int) -> bool:
        return self.recipient_id == user_id


__all__ = ["Message"]
