"""Use case for creating, or reusing, the conversation with another user."""

from typing import Any

from sqlalchemy.orm import Session

from campusshare.domain.entities import ContextRef
from campusshare.domain.exceptions import MessagingValidationError, ResourceNotFoundError
from campusshare.infrastructure.repositories import ConversationRepository, UserRepository
from campusshare.application.use_cases.messages.validators import (
    CONTEXT_REQUIRED_MESSAGE,
    require_identifier,
)

from .summaries import ConversationSummary, summarize


def open_conversation(
    session: Session,
    *,
    user_id: int,
    recipient_id: Any,
    context: ContextRef | None,
) -> ConversationSummary:
    """Return the conversation for the pair and context, creating it if needed.

    Shares the upsert used when a message is sent, so opening a thread and
    then messaging in it never yields two conversations.
    """

    recipient_id = require_identifier(recipient_id, "recipient_id")
    if context is None:
        raise MessagingValidationError(CONTEXT_REQUIRED_MESSAGE)
    if recipient_id == user_id:
        raise MessagingValidationError("You cannot start a conversation with yourself")
    if UserRepository(session).get_profile(recipient_id) is None:
        raise ResourceNotFoundError("Recipient not found")

    conversation = ConversationRepository(session).upsert(user_id, recipient_id, context)
    return summarize(session, [conversation])[0]
