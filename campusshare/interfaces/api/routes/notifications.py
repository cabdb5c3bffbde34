"""Endpoints for the caller's notification inbox."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campusshare.application.use_cases.notifications import (
    count_unread_notifications as count_unread_uc,
    delete_notification as delete_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read as mark_all_read_uc,
    mark_notification_read as mark_notification_read_uc,
)
from campusshare.domain.entities import UserProfile
from campusshare.domain.exceptions import MessagingValidationError, ResourceNotFoundError
from campusshare.infrastructure.database import get_db
from campusshare.interfaces.api.dependencies import get_current_user
from campusshare.interfaces.api.routes_helpers import (
    domain_error_to_http,
    notification_to_schema,
)
from campusshare.interfaces.api.schemas import (
    NotificationRead,
    StatusMessage,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    limit: int = Query(default=50),
    unread_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    try:
        notifications = list_notifications_uc(
            db, user_id=current_user.id, limit=limit, unread_only=unread_only
        )
    except MessagingValidationError as exc:
        raise domain_error_to_http(exc) from exc
    return [notification_to_schema(notification) for notification in notifications]


@router.get("/unread/count", response_model=UnreadCountRead)
def count_unread_notifications(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> UnreadCountRead:
    return UnreadCountRead(count=count_unread_uc(db, user_id=current_user.id))


@router.patch("/read/all", response_model=StatusMessage)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> StatusMessage:
    updated = mark_all_read_uc(db, user_id=current_user.id)
    return StatusMessage(message=f"{updated} notifications marked as read")


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> NotificationRead:
    try:
        notification = mark_notification_read_uc(
            db, user_id=current_user.id, notification_id=notification_id
        )
    except ResourceNotFoundError as exc:
        raise domain_error_to_http(exc) from exc
    return notification_to_schema(notification)


@router.delete(
    "/{notification_id}",
    response_model=StatusMessage,
    status_code=status.HTTP_200_OK,
)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> StatusMessage:
    try:
        delete_notification_uc(db, user_id=current_user.id, notification_id=notification_id)
    except ResourceNotFoundError as exc:
        raise domain_error_to_http(exc) from exc
    return StatusMessage(message="Notification deleted")
