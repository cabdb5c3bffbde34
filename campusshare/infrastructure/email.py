"""Utility helpers for sending transactional email notifications via SendGrid."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from campusshare.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailDeliveryResult:
    """Outcome of one delivery attempt; truthy when the provider accepted it."""

    sent: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.sent


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(status_code: Any, details: str | None) -> str:
    if status_code and details:
        return f"SendGrid responded with status {status_code}: {details}"
    if status_code:
        return f"SendGrid responded with status {status_code}"
    return details or "SendGrid request failed"


def send_email(recipient: str, subject: str, body: str) -> EmailDeliveryResult:
    """Send a plain-text email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return EmailDeliveryResult(False, "email delivery is not configured")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        plain_text_content=body,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:
        reason = _describe_failure(
            getattr(exc, "status_code", None),
            _extract_sendgrid_error_details(getattr(exc, "body", None)) or str(exc) or None,
        )
        logger.error("Error sending email via SendGrid: %s", reason)
        return EmailDeliveryResult(False, reason)

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        reason = _describe_failure(
            status_code, _extract_sendgrid_error_details(getattr(response, "body", None))
        )
        logger.error("SendGrid API rejected the email: %s", reason)
        return EmailDeliveryResult(False, reason)

    logger.info("Email '%s' accepted by SendGrid for %s", subject, recipient)
    return EmailDeliveryResult(True)


__all__ = ["EmailDeliveryResult", "send_email"]
