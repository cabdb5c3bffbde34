"""ORM models used by the application infrastructure."""

from .user import UserModel
from .subjects import ListingModel, NoteModel, TextbookModel
from .message import MessageModel
from .conversation import ConversationModel
from .notification import NotificationModel

__all__ = [
    "UserModel",
    "ListingModel",
    "NoteModel",
    "TextbookModel",
    "MessageModel",
    "ConversationModel",
    "NotificationModel",
]
