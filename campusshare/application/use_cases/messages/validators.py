"""Common validation helpers for messaging use cases."""

from __future__ import annotations

from typing import Any

from campusshare.domain.entities import ContextKind, ContextRef
from campusshare.domain.exceptions import MessagingValidationError

CONTEXT_REQUIRED_MESSAGE = "listing_id, textbook_id, or note_id is required"


def parse_identifier(value: Any, field: str) -> int:
    """Return ``value`` as a positive integer id or raise a validation error."""

    if isinstance(value, bool):
        raise MessagingValidationError(f"{field} is not a valid identifier")
    if isinstance(value, int):
        identifier = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        identifier = int(value.strip())
    else:
        raise MessagingValidationError(f"{field} is not a valid identifier")
    if identifier <= 0:
        raise MessagingValidationError(f"{field} is not a valid identifier")
    return identifier


def require_identifier(value: Any, field: str) -> int:
    """Like :func:`parse_identifier` but reports absent values as missing."""

    if value is None or (isinstance(value, str) and not value.strip()):
        raise MessagingValidationError(f"{field} is required")
    return parse_identifier(value, field)


def resolve_context(
    *,
    listing_id: Any = None,
    textbook_id: Any = None,
    note_id: Any = None,
) -> ContextRef:
    """Build the single :class:`ContextRef` described by the three optional ids."""

    provided = {
        kind: value
        for kind, value in (
            (ContextKind.LISTING, listing_id),
            (ContextKind.TEXTBOOK, textbook_id),
            (ContextKind.NOTE, note_id),
        )
        if value is not None and value != ""
    }
    if not provided:
        raise MessagingValidationError(CONTEXT_REQUIRED_MESSAGE)
    if len(provided) > 1:
        raise MessagingValidationError(
            "Only one of listing_id, textbook_id, or note_id may be provided"
        )
    ((kind, value),) = provided.items()
    return ContextRef(kind, parse_identifier(value, kind.field_name))


def normalize_text(text: Any) -> str:
    """Return the trimmed message body, rejecting empty or non-string values."""

    if not isinstance(text, str) or not text.strip():
        raise MessagingValidationError("text is required")
    return text.strip()


def parse_identifier_batch(values: Any, field: str) -> list[int]:
    """Validate a non-empty list of ids, rejecting the batch if any is malformed."""

    if not isinstance(values, (list, tuple)) or not values:
        raise MessagingValidationError(f"{field} must contain at least one id")
    return [parse_identifier(value, field) for value in values]


__all__ = [
    "CONTEXT_REQUIRED_MESSAGE",
    "normalize_text",
    "parse_identifier",
    "parse_identifier_batch",
    "require_identifier",
    "resolve_context",
]
