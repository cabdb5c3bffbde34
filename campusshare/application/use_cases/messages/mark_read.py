"""Use case for marking received messages as read."""

from typing import Any

from sqlalchemy.orm import Session

from campusshare.infrastructure.repositories import MessageRepository

from .validators import parse_identifier_batch


def mark_messages_read(session: Session, *, caller_id: int, message_ids: Any) -> int:
    """Mark the caller's inbound messages in ``message_ids`` as read.

    Ids of messages the caller did not receive are ignored, which also covers
    the caller's own outbound messages. The email escalation flags are never
    touched. Returns the number of messages updated.
    """

    ids = parse_identifier_batch(message_ids, "message_ids")
    return MessageRepository(session).mark_read_for_recipient(ids, recipient_id=caller_id)
