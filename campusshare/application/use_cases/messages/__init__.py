"""Use cases for sending, reading and escalating direct messages."""

from .escalation import EMAIL_SUBJECT, SweepResult, UnreadMessageEscalation
from .get_messages import get_messages
from .mark_read import mark_messages_read
from .send_message import MessageDispatcher, preview_text
from .validators import (
    normalize_text,
    parse_identifier,
    parse_identifier_batch,
    require_identifier,
    resolve_context,
)

__all__ = [
    "EMAIL_SUBJECT",
    "SweepResult",
    "UnreadMessageEscalation",
    "get_messages",
    "mark_messages_read",
    "MessageDispatcher",
    "preview_text",
    "normalize_text",
    "parse_identifier",
    "parse_identifier_batch",
    "require_identifier",
    "resolve_context",
]
