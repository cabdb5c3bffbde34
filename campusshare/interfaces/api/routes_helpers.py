"""Helper utilities shared across API route handlers."""

from __future__ import annotations

from collections.abc import Mapping

from fastapi import HTTPException, status

from campusshare.application.use_cases.conversations import ConversationSummary
from campusshare.domain.entities import Message, Notification, UserProfile
from campusshare.domain.exceptions import MessagingValidationError, ResourceNotFoundError
from campusshare.infrastructure.realtime import (
    serialize_message,
    serialize_notification,
    serialize_user,
)
from campusshare.interfaces.api.schemas import (
    ConversationRead,
    MessageRead,
    NotificationRead,
    UserSummaryRead,
)


def domain_error_to_http(exc: Exception) -> HTTPException:
    """Return the HTTP error matching a domain exception."""

    if isinstance(exc, ResourceNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, MessagingValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error"
    )


def message_to_schema(message: Message, sender: UserProfile | None) -> MessageRead:
    payload = serialize_message(message, sender=sender)
    payload["email_notification_sent"] = message.email_notification_sent
    return MessageRead.model_validate(payload)


def messages_to_schema(
    messages: list[Message], profiles: Mapping[int, UserProfile]
) -> list[MessageRead]:
    return [message_to_schema(message, profiles.get(message.sender_id)) for message in messages]


def notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(serialize_notification(notification))


def conversation_to_schema(summary: ConversationSummary) -> ConversationRead:
    conversation = summary.conversation
    participants = [
        UserSummaryRead.model_validate(serialize_user(profile, user_id))
        for profile, user_id in zip(summary.participants, conversation.participant_ids)
    ]
    last_message = (
        message_to_schema(summary.last_message, summary.last_message_sender)
        if summary.last_message is not None
        else None
    )
    return ConversationRead(
        id=conversation.id or 0,
        participants=participants,
        context_type=conversation.context.kind.value,
        **conversation.context.as_fields(),
        subject_title=summary.subject_title,
        last_message=last_message,
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
    )


__all__ = [
    "conversation_to_schema",
    "domain_error_to_http",
    "message_to_schema",
    "messages_to_schema",
    "notification_to_schema",
]
