"""Use cases for reading and managing a user's notification inbox."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from campusshare.domain.entities import Notification
from campusshare.domain.exceptions import MessagingValidationError, ResourceNotFoundError
from campusshare.infrastructure.repositories import NotificationRepository

MAX_PAGE_SIZE = 100


def list_notifications(
    session: Session,
    *,
    user_id: int,
    limit: int = 50,
    unread_only: bool = False,
) -> Sequence[Notification]:
    """Return the newest notifications of ``user_id``."""

    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise MessagingValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    return NotificationRepository(session).list_for_user(
        user_id, limit=limit, unread_only=unread_only
    )


def count_unread_notifications(session: Session, *, user_id: int) -> int:
    return NotificationRepository(session).count_unread(user_id)


def mark_notification_read(
    session: Session, *, user_id: int, notification_id: int
) -> Notification:
    notification = NotificationRepository(session).mark_as_read(
        notification_id, user_id=user_id
    )
    if notification is None:
        raise ResourceNotFoundError("Notification not found")
    return notification


def mark_all_notifications_read(session: Session, *, user_id: int) -> int:
    return NotificationRepository(session).mark_all_as_read(user_id)


def delete_notification(session: Session, *, user_id: int, notification_id: int) -> None:
    if not NotificationRepository(session).delete(notification_id, user_id=user_id):
        raise ResourceNotFoundError("Notification not found")
