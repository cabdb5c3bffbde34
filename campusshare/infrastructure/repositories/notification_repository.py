"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from campusshare.domain.entities import Notification, NotificationType, RelatedType
from campusshare.infrastructure.models import NotificationModel
from campusshare.utils import (
    from_storage_datetime,
    now_in_app_timezone,
    to_storage_datetime,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Every read or write is scoped to the owning ``user_id``; a notification
    belonging to somebody else behaves exactly like a missing one.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: int,
        *,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: int) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
            .count()
        )

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            type=NotificationType(notification.type).value,
            title=notification.title,
            message=notification.message,
            read=notification.read,
            related_id=notification.related_id,
            related_type=(
                RelatedType(notification.related_type).value
                if notification.related_type
                else None
            ),
            created_at=to_storage_datetime(
                notification.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: int, *, user_id: int) -> Notification | None:
        model = self._get_owned(notification_id, user_id)
        if model is None:
            return None
        model.read = True
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self, user_id: int) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def delete(self, notification_id: int, *, user_id: int) -> bool:
        model = self._get_owned(notification_id, user_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def _get_owned(self, notification_id: int, user_id: int) -> NotificationModel | None:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.user_id == user_id)
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            read=bool(model.read),
            related_id=model.related_id,
            related_type=RelatedType(model.related_type) if model.related_type else None,
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["NotificationRepository"]
