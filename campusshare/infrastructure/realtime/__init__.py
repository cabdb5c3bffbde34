"""Realtime delivery helpers for the infrastructure layer."""

from .payloads import serialize_message, serialize_notification, serialize_user
from .publisher import NEW_MESSAGE_EVENT, NEW_NOTIFICATION_EVENT, RealtimePublisher
from .registry import ConnectionRegistry, Handle, user_channel

__all__ = [
    "ConnectionRegistry",
    "Handle",
    "user_channel",
    "RealtimePublisher",
    "NEW_MESSAGE_EVENT",
    "NEW_NOTIFICATION_EVENT",
    "serialize_message",
    "serialize_notification",
    "serialize_user",
]
