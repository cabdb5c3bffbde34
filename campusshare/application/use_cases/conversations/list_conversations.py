"""Use case for listing the conversations a user takes part in."""

from sqlalchemy.orm import Session

from campusshare.infrastructure.repositories import ConversationRepository

from .summaries import ConversationSummary, summarize


def list_conversations(session: Session, *, user_id: int) -> list[ConversationSummary]:
    """Return the user's conversations, most recently active first."""

    conversations = ConversationRepository(session).list_for_user(user_id)
    return summarize(session, conversations)
