from .conversation import ConversationCreate, ConversationRead
from .message import (
    MessageCreate,
    MessageMarkReadRequest,
    MessageMarkReadResponse,
    MessageRead,
    UserSummaryRead,
)
from .notification import NotificationRead, StatusMessage, UnreadCountRead

__all__ = [
    "ConversationCreate",
    "ConversationRead",
    "MessageCreate",
    "MessageMarkReadRequest",
    "MessageMarkReadResponse",
    "MessageRead",
    "UserSummaryRead",
    "NotificationRead",
    "StatusMessage",
    "UnreadCountRead",
]
