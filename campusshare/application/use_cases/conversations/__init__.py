"""Use cases for browsing conversation threads."""

from .get_conversation import get_conversation
from .list_conversations import list_conversations
from .open_conversation import open_conversation
from .summaries import ConversationSummary

__all__ = [
    "ConversationSummary",
    "get_conversation",
    "list_conversations",
    "open_conversation",
]
