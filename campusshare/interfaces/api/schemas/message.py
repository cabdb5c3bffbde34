"""Pydantic models describing message payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# Ids are accepted loosely and validated by the use cases, so malformed values
# produce the same 400 response over HTTP and over the websocket.
IdentifierInput = int | str | None


class UserSummaryRead(BaseModel):
    """Display fields of a user shown next to their messages."""

    id: int
    username: str | None = None
    name: str | None = None
    profile_picture: str | None = None


class MessageCreate(BaseModel):
    """Payload used to send a message about exactly one listing, textbook or note."""

    recipient_id: IdentifierInput = None
    text: str | None = None
    listing_id: IdentifierInput = None
    textbook_id: IdentifierInput = None
    note_id: IdentifierInput = None


class MessageRead(BaseModel):
    """Representation of a message delivered to the client."""

    id: int
    sender: UserSummaryRead
    sender_id: int
    recipient_id: int
    text: str
    context_type: str
    listing_id: int | None = None
    textbook_id: int | None = None
    note_id: int | None = None
    read: bool
    email_notification_sent: bool = False
    created_at: datetime | None = None


class MessageMarkReadRequest(BaseModel):
    """Payload used to mark a batch of received messages as read."""

    message_ids: list[IdentifierInput] = Field(
        default_factory=list, description="Identifiers of the messages to mark as read"
    )


class MessageMarkReadResponse(BaseModel):
    message: str = "Messages marked as read"
    updated: int


__all__ = [
    "MessageCreate",
    "MessageMarkReadRequest",
    "MessageMarkReadResponse",
    "MessageRead",
    "UserSummaryRead",
]
