"""Domain entities exposed by the application."""

from .context import ContextKind, ContextRef
from .conversation import Conversation, ordered_pair
from .message import Message
from .notification import Notification, NotificationType, RelatedType
from .user import UserProfile

__all__ = [
    "ContextKind",
    "ContextRef",
    "Conversation",
    "ordered_pair",
    "Message",
    "Notification",
    "NotificationType",
    "RelatedType",
    "UserProfile",
]
