"""JSON payloads pushed to websocket clients."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from campusshare.domain.entities import Message, Notification, UserProfile


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_user(profile: UserProfile | None, user_id: int) -> dict[str, Any]:
    """Return the display fields other users see for ``user_id``."""

    if profile is None:
        return {"id": user_id, "username": None, "name": None, "profile_picture": None}
    return {
        "id": profile.id,
        "username": profile.username,
        "name": profile.name,
        "profile_picture": profile.profile_picture,
    }


def serialize_message(
    message: Message, *, sender: UserProfile | None = None
) -> dict[str, Any]:
    """Return the ``new_message`` payload for ``message``."""

    return {
        "id": message.id,
        "sender": serialize_user(sender, message.sender_id),
        "sender_id": message.sender_id,
        "recipient_id": message.recipient_id,
        "text": message.text,
        "context_type": message.context.kind.value,
        **message.context.as_fields(),
        "read": message.read,
        "created_at": _isoformat(message.created_at),
    }


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the ``new_notification`` payload for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "read": notification.read,
        "related_id": notification.related_id,
        "related_type": notification.related_type.value if notification.related_type else None,
        "created_at": _isoformat(notification.created_at),
    }


__all__ = ["serialize_message", "serialize_notification", "serialize_user"]
