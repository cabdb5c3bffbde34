"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    type: str
    title: str
    message: str
    read: bool
    related_id: int | None = None
    related_type: str | None = None
    created_at: datetime | None = None


class UnreadCountRead(BaseModel):
    count: int


class StatusMessage(BaseModel):
    """Acknowledgement returned by endpoints without a resource body."""

    message: str


__all__ = ["NotificationRead", "StatusMessage", "UnreadCountRead"]
