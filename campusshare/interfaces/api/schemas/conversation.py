"""Pydantic models describing conversation payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .message import IdentifierInput, MessageRead, UserSummaryRead


class ConversationCreate(BaseModel):
    """Payload used to open (or reuse) a conversation with another user."""

    recipient_id: IdentifierInput = None
    listing_id: IdentifierInput = None
    textbook_id: IdentifierInput = None
    note_id: IdentifierInput = None


class ConversationRead(BaseModel):
    """Conversation with its participants and most recent message."""

    id: int
    participants: list[UserSummaryRead] = Field(default_factory=list)
    context_type: str
    listing_id: int | None = None
    textbook_id: int | None = None
    note_id: int | None = None
    subject_title: str | None = None
    last_message: MessageRead | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["ConversationCreate", "ConversationRead"]
