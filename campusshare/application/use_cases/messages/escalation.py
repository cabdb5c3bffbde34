"""Email escalation for messages left unread past the notification delay."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusshare.domain.entities import ContextRef, Message, UserProfile
from campusshare.infrastructure.email import EmailDeliveryResult
from campusshare.infrastructure.repositories import (
    MessageRepository,
    SubjectRepository,
    UserRepository,
)
from campusshare.utils import minutes_since, now_in_app_timezone

from .send_message import preview_text

logger = logging.getLogger(__name__)

EMAIL_SUBJECT = "New Message Awaits You - CUNY Share"
EMAIL_PREVIEW_LENGTH = 100

EmailSender = Callable[[str, str, str], EmailDeliveryResult]


@dataclass
class SweepResult:
    """Counters describing one pass over the unread messages."""

    checked: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    error: str | None = None


class UnreadMessageEscalation:
    """Send one email per message that stays unread longer than ``delay``.

    A message becomes a candidate once it is unread, not yet escalated and at
    least ``delay`` old. Only a confirmed send flips its
    ``email_notification_sent`` flag, so failed or timed out sends are simply
    picked up again by the next sweep. Reading the message afterwards does not
    undo the escalation.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        send_email: EmailSender,
        *,
        delay: timedelta = timedelta(minutes=10),
        send_timeout: float = 15.0,
        frontend_url: str = "https://cunyshare.xyz",
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._session_factory = session_factory
        self._send_email = send_email
        self._delay = delay
        self._send_timeout = send_timeout
        self._frontend_url = frontend_url.rstrip("/")
        self._clock = clock
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="unread-email")

    def run_sweep(self, now: datetime | None = None) -> SweepResult:
        """Process every eligible message once; never raises."""

        now = now or self._clock()
        result = SweepResult()
        session = self._session_factory()
        try:
            candidates = MessageRepository(session).list_pending_email(now - self._delay)
            result.checked = len(candidates)
            if not candidates:
                return result
            logger.info(
                "Found %s unread message(s) eligible for email notification", len(candidates)
            )
            profiles = UserRepository(session).get_profiles(
                {m.sender_id for m in candidates} | {m.recipient_id for m in candidates}
            )
            for message in candidates:
                self._process(session, message, profiles, now, result)
        except Exception as exc:
            session.rollback()
            logger.exception("Unread message email sweep aborted")
            result.error = str(exc)
        finally:
            session.close()

        logger.info(
            "Email notification check complete: %s sent, %s skipped, %s failed",
            result.sent,
            result.skipped,
            result.failed,
        )
        return result

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _process(
        self,
        session: Session,
        message: Message,
        profiles: dict[int, UserProfile],
        now: datetime,
        result: SweepResult,
    ) -> None:
        recipient = profiles.get(message.recipient_id)
        if recipient is None or not recipient.email:
            logger.warning("Skipping message %s: recipient has no email", message.id)
            result.skipped += 1
            return
        if message.sender_id == message.recipient_id:
            result.skipped += 1
            return

        try:
            body = self.compose_body(
                message,
                sender=profiles.get(message.sender_id),
                recipient=recipient,
                subject_fragment=self._subject_fragment(session, message.context),
                now=now,
            )
            delivery = self._send_with_timeout(recipient.email, EMAIL_SUBJECT, body)
            if not delivery:
                logger.warning(
                    "Email notification for message %s not sent: %s",
                    message.id,
                    delivery.reason,
                )
                result.failed += 1
                return
            MessageRepository(session).mark_email_sent(message.id, sent_at=now)
        except Exception:
            session.rollback()
            logger.exception("Failed to send email notification for message %s", message.id)
            result.failed += 1
            return

        result.sent += 1
        logger.info("Sent email notification for message %s to %s", message.id, recipient.email)

    def _send_with_timeout(self, to: str, subject: str, body: str) -> EmailDeliveryResult:
        future = self._executor.submit(self._send_email, to, subject, body)
        try:
            return future.result(timeout=self._send_timeout)
        except FutureTimeoutError:
            future.cancel()
            return EmailDeliveryResult(
                False, f"timed out after {self._send_timeout:g} seconds"
            )

    @staticmethod
    def _subject_fragment(session: Session, context: ContextRef) -> str:
        try:
            title = SubjectRepository(session).get_title(context)
        except SQLAlchemyError:
            session.rollback()
            logger.warning(
                "Could not resolve the %s %s title", context.kind.value, context.id, exc_info=True
            )
            return ""
        if not title:
            return ""
        return f' about your {context.kind.label} "{title}"'

    def compose_body(
        self,
        message: Message,
        *,
        sender: UserProfile | None,
        recipient: UserProfile,
        subject_fragment: str,
        now: datetime,
    ) -> str:
        sender_name = sender.username if sender and sender.username else "Someone"
        recipient_name = recipient.username or "there"
        minutes = minutes_since(message.created_at, now) if message.created_at else 0
        return (
            f"Hello {recipient_name},\n\n"
            f"You have an unread message from {sender_name}{subject_fragment} on CUNY Share.\n\n"
            "Message Preview:\n"
            f'"{preview_text(message.text, EMAIL_PREVIEW_LENGTH)}"\n\n'
            f"This message was sent {minutes} minutes ago and is waiting for you in the app.\n\n"
            "View and respond to this message:\n"
            f"{self._frontend_url}/messages\n\n"
            "Thank you for using CUNY Share!\n\n"
            "Best regards,\n"
            "CUNY Share Team\n\n"
            "---\n"
            "You're receiving this because you have an unread message. "
            "Reply in the app to continue the conversation."
        )


__all__ = ["EMAIL_SUBJECT", "SweepResult", "UnreadMessageEscalation"]
