"""Endpoints for sending and reading direct messages."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusshare.application.use_cases.messages import (
    MessageDispatcher,
    get_messages as get_messages_uc,
    mark_messages_read as mark_messages_read_uc,
    resolve_context,
)
from campusshare.domain.entities import UserProfile
from campusshare.domain.exceptions import MessagingValidationError, ResourceNotFoundError
from campusshare.infrastructure.database import get_db
from campusshare.infrastructure.repositories import UserRepository
from campusshare.interfaces.api.dependencies import get_current_user, get_dispatcher
from campusshare.interfaces.api.routes_helpers import (
    domain_error_to_http,
    message_to_schema,
    messages_to_schema,
)
from campusshare.interfaces.api.schemas import (
    MessageCreate,
    MessageMarkReadRequest,
    MessageMarkReadResponse,
    MessageRead,
)

router = APIRouter(prefix="/messages", tags=["messages"])

logger = logging.getLogger(__name__)


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
    dispatcher: MessageDispatcher = Depends(get_dispatcher),
) -> MessageRead:
    """Send a message about one listing, textbook or note to another user."""

    try:
        context = resolve_context(
            listing_id=payload.listing_id,
            textbook_id=payload.textbook_id,
            note_id=payload.note_id,
        )
        message = dispatcher.send_message(
            db,
            sender_id=current_user.id,
            recipient_id=payload.recipient_id,
            text=payload.text,
            context=context,
        )
    except (MessagingValidationError, ResourceNotFoundError) as exc:
        raise domain_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send message",
        ) from exc

    return message_to_schema(message, current_user)


@router.get("", response_model=list[MessageRead])
def list_messages(
    other_user_id: str | None = Query(default=None),
    listing_id: str | None = Query(default=None),
    textbook_id: str | None = Query(default=None),
    note_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> list[MessageRead]:
    """Return the thread with ``other_user_id`` about one subject, oldest first."""

    try:
        context = resolve_context(
            listing_id=listing_id, textbook_id=textbook_id, note_id=note_id
        )
        messages = list(
            get_messages_uc(
                db,
                caller_id=current_user.id,
                other_user_id=other_user_id,
                context=context,
            )
        )
    except MessagingValidationError as exc:
        raise domain_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to load messages for user %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load messages",
        ) from exc

    profiles = UserRepository(db).get_profiles(
        {message.sender_id for message in messages}
    )
    return messages_to_schema(messages, profiles)


@router.patch("/read", response_model=MessageMarkReadResponse)
def mark_messages_read(
    payload: MessageMarkReadRequest,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> MessageMarkReadResponse:
    """Mark received messages as read; ids of other users' messages are ignored."""

    try:
        updated = mark_messages_read_uc(
            db, caller_id=current_user.id, message_ids=payload.message_ids
        )
    except MessagingValidationError as exc:
        raise domain_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to mark messages read for user %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to mark messages as read",
        ) from exc

    return MessageMarkReadResponse(updated=updated)
