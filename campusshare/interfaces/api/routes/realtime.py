"""Websocket handler streaming messages and notifications to the authenticated user."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from campusshare.application.use_cases.messages import (
    MessageDispatcher,
    mark_messages_read,
    resolve_context,
)
from campusshare.application.use_cases.notifications import list_notifications
from campusshare.domain.entities import UserProfile
from campusshare.domain.exceptions import MessagingValidationError, ResourceNotFoundError
from campusshare.infrastructure.database import SessionLocal
from campusshare.infrastructure.realtime import (
    ConnectionRegistry,
    serialize_message,
    serialize_notification,
)
from campusshare.interfaces.api.dependencies import resolve_current_user

router = APIRouter(tags=["realtime"])

logger = logging.getLogger(__name__)

POLICY_VIOLATION = 1008
INTERNAL_ERROR = 1011


def _authenticate(token: str) -> tuple[UserProfile, list[dict[str, Any]]]:
    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        pending = list_notifications(session, user_id=user.id, unread_only=True)
        return user, [serialize_notification(notification) for notification in pending]
    finally:
        session.close()


def _frame_body(frame: dict[str, Any]) -> dict[str, Any]:
    """Return the frame arguments, sent either under ``data`` or inline."""

    body = frame.get("data")
    return body if isinstance(body, dict) else frame


def _send_message(
    dispatcher: MessageDispatcher, user: UserProfile, frame: dict[str, Any]
) -> dict[str, Any]:
    session = SessionLocal()
    try:
        context = resolve_context(
            listing_id=frame.get("listing_id"),
            textbook_id=frame.get("textbook_id"),
            note_id=frame.get("note_id"),
        )
        message = dispatcher.send_message(
            session,
            sender_id=user.id,
            recipient_id=frame.get("recipient_id"),
            text=frame.get("text"),
            context=context,
        )
        return serialize_message(message, sender=user)
    finally:
        session.close()


def _mark_read(user: UserProfile, frame: dict[str, Any]) -> int:
    session = SessionLocal()
    try:
        return mark_messages_read(
            session, caller_id=user.id, message_ids=frame.get("message_ids")
        )
    finally:
        session.close()


@router.websocket("/ws")
async def messaging_websocket(websocket: WebSocket) -> None:
    """Register the caller for realtime delivery and serve inbound frames."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=POLICY_VIOLATION)
        return

    try:
        user, pending_notifications = await run_in_threadpool(_authenticate, token)
    except HTTPException:
        await websocket.close(code=POLICY_VIOLATION)
        return
    except SQLAlchemyError:
        logger.exception("Failed to load the realtime session for a websocket client")
        await websocket.close(code=INTERNAL_ERROR)
        return

    registry: ConnectionRegistry = websocket.app.state.connection_registry
    dispatcher: MessageDispatcher = websocket.app.state.message_dispatcher

    await registry.connect(user.id, websocket)
    logger.info("User %s connected to the realtime channel", user.id)
    try:
        await websocket.send_json({"type": "init", "data": pending_notifications})
        while True:
            try:
                frame = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                await websocket.send_json({"type": "error", "data": {"detail": "Invalid JSON"}})
                continue

            if not isinstance(frame, dict):
                continue

            frame_type = frame.get("type")
            if frame_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if frame_type == "send_message":
                try:
                    payload = await run_in_threadpool(
                        _send_message, dispatcher, user, _frame_body(frame)
                    )
                except (MessagingValidationError, ResourceNotFoundError) as exc:
                    await websocket.send_json({"type": "error", "data": {"detail": str(exc)}})
                except SQLAlchemyError:
                    await websocket.send_json(
                        {"type": "error", "data": {"detail": "Failed to send message"}}
                    )
                else:
                    await websocket.send_json({"type": "message_sent", "data": payload})
                continue

            if frame_type == "mark_read":
                try:
                    updated = await run_in_threadpool(_mark_read, user, _frame_body(frame))
                except MessagingValidationError as exc:
                    await websocket.send_json({"type": "error", "data": {"detail": str(exc)}})
                except SQLAlchemyError:
                    logger.exception("Failed to mark messages read for user %s", user.id)
                    await websocket.send_json(
                        {"type": "error", "data": {"detail": "Failed to mark messages as read"}}
                    )
                else:
                    await websocket.send_json({"type": "messages_read", "data": {"updated": updated}})
                continue
    except WebSocketDisconnect:
        pass
    finally:
        registry.unregister(user.id, websocket)
        logger.info("User %s disconnected from the realtime channel", user.id)
