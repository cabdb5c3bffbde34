"""Domain entity representing a two-party conversation thread."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .context import ContextRef


def ordered_pair(first_user_id: int, second_user_id: int) -> tuple[int, int]:
    """Return the participant pair in the canonical (low, high) order."""

    return (
        (first_user_id, second_user_id)
        if first_user_id <= second_user_id
        else (second_user_id, first_user_id)
    )


@dataclass
class Conversation:
    """Thread grouping every message exchanged by a pair about one context."""

    id: int | None
    participant_ids: tuple[int, int]
    context: ContextRef
    last_message_id: int | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def involves(self, user_id: int) -> bool:
        """Return ``True`` when ``user_id`` is one of the participants."""

        return user_id in self.participant_ids

    def other_participant(self, user_id: int) -> int:
        """Return the participant that is not ``user_id``."""

        low, high = self.participant_ids
        return high if low == user_id else low


__all__ = ["Conversation", "ordered_pair"]
