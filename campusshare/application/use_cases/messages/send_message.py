"""Use case for sending a message and propagating it to the recipient."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusshare.domain.entities import (
    ContextRef,
    Message,
    Notification,
    NotificationType,
    RelatedType,
    UserProfile,
)
from campusshare.domain.exceptions import MessagingValidationError, ResourceNotFoundError
from campusshare.infrastructure.realtime import (
    NEW_MESSAGE_EVENT,
    NEW_NOTIFICATION_EVENT,
    RealtimePublisher,
    serialize_message,
    serialize_notification,
)
from campusshare.infrastructure.repositories import (
    ConversationRepository,
    MessageRepository,
    NotificationRepository,
    UserRepository,
)
from campusshare.utils import now_in_app_timezone

from .validators import CONTEXT_REQUIRED_MESSAGE, normalize_text, require_identifier

logger = logging.getLogger(__name__)

NOTIFICATION_PREVIEW_LENGTH = 100


def preview_text(text: str, limit: int = NOTIFICATION_PREVIEW_LENGTH) -> str:
    """Return ``text`` cut to ``limit`` characters, marking the cut with ``...``."""

    return text if len(text) <= limit else f"{text[:limit]}..."


class MessageDispatcher:
    """Record a message and fan it out to the recipient.

    The message row and the conversation upsert are committed together and
    are the only part of a send that can fail it. The inbox notification and
    the realtime push happen afterwards and are best effort: their failures
    are logged and the created message is still returned.
    """

    def __init__(self, publisher: RealtimePublisher) -> None:
        self._publisher = publisher

    def send_message(
        self,
        session: Session,
        *,
        sender_id: Any,
        recipient_id: Any,
        text: Any,
        context: ContextRef | None,
    ) -> Message:
        sender_id = require_identifier(sender_id, "sender_id")
        recipient_id = require_identifier(recipient_id, "recipient_id")
        body = normalize_text(text)
        if context is None:
            raise MessagingValidationError(CONTEXT_REQUIRED_MESSAGE)
        if sender_id == recipient_id:
            raise MessagingValidationError("You cannot send a message to yourself")

        users = UserRepository(session)
        profiles = users.get_profiles((sender_id, recipient_id))
        if recipient_id not in profiles:
            raise ResourceNotFoundError("Recipient not found")
        sender = profiles.get(sender_id)

        message = self._persist(session, sender_id, recipient_id, body, context)
        notification = self._create_notification(session, message, sender)
        self._push(message, sender, notification)
        return message

    def _persist(
        self,
        session: Session,
        sender_id: int,
        recipient_id: int,
        body: str,
        context: ContextRef,
    ) -> Message:
        now = now_in_app_timezone()
        try:
            message = MessageRepository(session).add(
                Message(
                    id=None,
                    sender_id=sender_id,
                    recipient_id=recipient_id,
                    text=body,
                    context=context,
                    created_at=now,
                ),
                commit=False,
            )
            ConversationRepository(session).upsert(
                sender_id,
                recipient_id,
                context,
                last_message_id=message.id,
                touched_at=now,
                commit=False,
            )
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception(
                "Failed to store message from user %s to user %s", sender_id, recipient_id
            )
            raise
        return message

    def _create_notification(
        self, session: Session, message: Message, sender: UserProfile | None
    ) -> Notification | None:
        sender_name = sender.display_name if sender else "Someone"
        try:
            return NotificationRepository(session).create(
                Notification(
                    id=None,
                    user_id=message.recipient_id,
                    type=NotificationType.MESSAGE,
                    title=f"New message from {sender_name}",
                    message=f"{sender_name}: {preview_text(message.text)}",
                    related_id=message.id,
                    related_type=RelatedType.MESSAGE,
                    created_at=message.created_at,
                )
            )
        except Exception:
            session.rollback()
            logger.exception("Failed to create notification for message %s", message.id)
            return None

    def _push(
        self,
        message: Message,
        sender: UserProfile | None,
        notification: Notification | None,
    ) -> None:
        try:
            self._publisher.broadcast_to_user(
                message.recipient_id,
                NEW_MESSAGE_EVENT,
                serialize_message(message, sender=sender),
            )
            if notification is not None:
                self._publisher.broadcast_to_user(
                    message.recipient_id,
                    NEW_NOTIFICATION_EVENT,
                    serialize_notification(notification),
                )
        except Exception:
            logger.exception(
                "Failed to push message %s to user %s", message.id, message.recipient_id
            )


__all__ = ["MessageDispatcher", "preview_text"]
