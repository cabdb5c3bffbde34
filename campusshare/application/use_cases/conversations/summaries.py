"""Assemble conversations with the records a client needs to render them."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from campusshare.domain.entities import Conversation, Message, UserProfile
from campusshare.infrastructure.repositories import (
    MessageRepository,
    SubjectRepository,
    UserRepository,
)


@dataclass
class ConversationSummary:
    """A conversation together with its participants and latest message."""

    conversation: Conversation
    participants: list[UserProfile | None]
    last_message: Message | None
    last_message_sender: UserProfile | None
    subject_title: str | None


def summarize(session: Session, conversations: Sequence[Conversation]) -> list[ConversationSummary]:
    """Resolve participants, last messages and subject titles for ``conversations``."""

    user_ids = {uid for conversation in conversations for uid in conversation.participant_ids}
    profiles = UserRepository(session).get_profiles(user_ids)
    messages = MessageRepository(session)
    subjects = SubjectRepository(session)

    summaries: list[ConversationSummary] = []
    for conversation in conversations:
        last_message = (
            messages.get(conversation.last_message_id)
            if conversation.last_message_id
            else None
        )
        summaries.append(
            ConversationSummary(
                conversation=conversation,
                participants=[profiles.get(uid) for uid in conversation.participant_ids],
                last_message=last_message,
                last_message_sender=(
                    profiles.get(last_message.sender_id) if last_message else None
                ),
                subject_title=subjects.get_title(conversation.context),
            )
        )
    return summaries
