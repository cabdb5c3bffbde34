"""Use case for retrieving a single conversation."""

from sqlalchemy.orm import Session

from campusshare.domain.exceptions import ResourceNotFoundError
from campusshare.infrastructure.repositories import ConversationRepository

from .summaries import ConversationSummary, summarize


def get_conversation(
    session: Session, *, user_id: int, conversation_id: int
) -> ConversationSummary:
    """Return the conversation or raise when it is missing or not the user's."""

    conversation = ConversationRepository(session).get(conversation_id)
    # Conversations of other users are reported exactly like missing ones.
    if conversation is None or not conversation.involves(user_id):
        raise ResourceNotFoundError("Conversation not found")
    return summarize(session, [conversation])[0]
