"""Endpoints for browsing the caller's conversations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusshare.application.use_cases.conversations import (
    get_conversation as get_conversation_uc,
    list_conversations as list_conversations_uc,
    open_conversation as open_conversation_uc,
)
from campusshare.application.use_cases.messages import resolve_context
from campusshare.domain.entities import UserProfile
from campusshare.domain.exceptions import MessagingValidationError, ResourceNotFoundError
from campusshare.infrastructure.database import get_db
from campusshare.interfaces.api.dependencies import get_current_user
from campusshare.interfaces.api.routes_helpers import (
    conversation_to_schema,
    domain_error_to_http,
)
from campusshare.interfaces.api.schemas import ConversationCreate, ConversationRead

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationRead])
def list_conversations(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> list[ConversationRead]:
    summaries = list_conversations_uc(db, user_id=current_user.id)
    return [conversation_to_schema(summary) for summary in summaries]


@router.post("", response_model=ConversationRead)
def open_conversation(
    payload: ConversationCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> ConversationRead:
    """Return the conversation with ``recipient_id`` about a subject, creating it if needed."""

    try:
        context = resolve_context(
            listing_id=payload.listing_id,
            textbook_id=payload.textbook_id,
            note_id=payload.note_id,
        )
        summary = open_conversation_uc(
            db,
            user_id=current_user.id,
            recipient_id=payload.recipient_id,
            context=context,
        )
    except (MessagingValidationError, ResourceNotFoundError) as exc:
        raise domain_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to open conversation",
        ) from exc
    return conversation_to_schema(summary)


@router.get("/{conversation_id}", response_model=ConversationRead)
def get_conversation(
    conversation_id: int,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
) -> ConversationRead:
    try:
        summary = get_conversation_uc(
            db, user_id=current_user.id, conversation_id=conversation_id
        )
    except ResourceNotFoundError as exc:
        raise domain_error_to_http(exc) from exc
    return conversation_to_schema(summary)
