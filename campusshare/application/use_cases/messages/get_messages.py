"""Use case for reading the thread between two users about one context."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from campusshare.domain.entities import ContextRef, Message
from campusshare.domain.exceptions import MessagingValidationError
from campusshare.infrastructure.repositories import MessageRepository

from .validators import CONTEXT_REQUIRED_MESSAGE, require_identifier


def get_messages(
    session: Session,
    *,
    caller_id: int,
    other_user_id: Any,
    context: ContextRef | None,
) -> Sequence[Message]:
    """Return every message exchanged with ``other_user_id``, oldest first."""

    other_user_id = require_identifier(other_user_id, "other_user_id")
    if context is None:
        raise MessagingValidationError(CONTEXT_REQUIRED_MESSAGE)
    return MessageRepository(session).list_thread(caller_id, other_user_id, context)
