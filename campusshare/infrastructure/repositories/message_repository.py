"""Persistence helpers for message entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from campusshare.domain.entities import ContextKind, ContextRef, Message
from campusshare.infrastructure.models import MessageModel
from campusshare.utils import (
    from_storage_datetime,
    now_in_app_timezone,
    to_storage_datetime,
)


class MessageRepository:
    """Provide the queries the messaging pipeline runs against messages."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, message_id: int) -> Message | None:
        model = self.session.get(MessageModel, message_id)
        return self._to_entity(model) if model else None

    def add(self, message: Message, *, commit: bool = True) -> Message:
        """Insert ``message``; with ``commit=False`` the row is only flushed."""

        model = MessageModel(
            sender_id=message.sender_id,
            recipient_id=message.recipient_id,
            context_type=message.context.kind.value,
            context_id=message.context.id,
            text=message.text,
            read=message.read,
            email_notification_sent=message.email_notification_sent,
            email_notification_sent_at=to_storage_datetime(
                message.email_notification_sent_at
            ),
            created_at=to_storage_datetime(message.created_at or now_in_app_timezone()),
        )
        self.session.add(model)
        if commit:
            self.session.commit()
            self.session.refresh(model)
        else:
            self.session.flush()
        return self._to_entity(model)

    def list_thread(
        self, first_user_id: int, second_user_id: int, context: ContextRef
    ) -> Sequence[Message]:
        """Return every message between both users about ``context``, oldest first."""

        query = (
            self.session.query(MessageModel)
            .filter(
                or_(
                    and_(
                        MessageModel.sender_id == first_user_id,
                        MessageModel.recipient_id == second_user_id,
                    ),
                    and_(
                        MessageModel.sender_id == second_user_id,
                        MessageModel.recipient_id == first_user_id,
                    ),
                )
            )
            .filter(MessageModel.context_type == context.kind.value)
            .filter(MessageModel.context_id == context.id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def mark_read_for_recipient(
        self, message_ids: Iterable[int], *, recipient_id: int
    ) -> int:
        """Flip ``read`` on the given messages addressed to ``recipient_id``.

        Messages addressed to anybody else are left untouched. Returns the
        number of rows updated.
        """

        ids = list({int(message_id) for message_id in message_ids})
        if not ids:
            return 0
        updated = (
            self.session.query(MessageModel)
            .filter(
                MessageModel.id.in_(ids),
                MessageModel.recipient_id == recipient_id,
            )
            .update({MessageModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def list_pending_email(self, cutoff: datetime) -> Sequence[Message]:
        """Return unread, not yet escalated messages created at or before ``cutoff``."""

        query = (
            self.session.query(MessageModel)
            .filter(MessageModel.read.is_(False))
            .filter(MessageModel.email_notification_sent.is_(False))
            .filter(MessageModel.created_at <= to_storage_datetime(cutoff))
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def mark_email_sent(self, message_id: int, *, sent_at: datetime) -> None:
        """Record that the unread message email for ``message_id`` went out."""

        model = self.session.get(MessageModel, message_id)
        if model is None:
            msg = f"Message with id {message_id} not found"
            raise ValueError(msg)
        model.email_notification_sent = True
        model.email_notification_sent_at = to_storage_datetime(sent_at)
        self.session.add(model)
        self.session.commit()

    @staticmethod
    def _to_entity(model: MessageModel) -> Message:
        return Message(
            id=model.id,
            sender_id=model.sender_id,
            recipient_id=model.recipient_id,
            text=model.text,
            context=ContextRef(ContextKind(model.context_type), model.context_id),
            read=bool(model.read),
            email_notification_sent=bool(model.email_notification_sent),
            email_notification_sent_at=from_storage_datetime(
                model.email_notification_sent_at
            ),
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["MessageRepository"]
