"""Subject reference a message or conversation is about."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ContextKind(str, Enum):
    """Kinds of marketplace entities a conversation can be scoped to."""

    LISTING = "listing"
    TEXTBOOK = "textbook"
    NOTE = "note"

    @property
    def field_name(self) -> str:
        """Name of the request/response attribute carrying this kind of id."""

        return f"{self.value}_id"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class ContextRef:
    """Exactly one listing, textbook or note identified by ``id``."""

    kind: ContextKind
    id: int

    @classmethod
    def listing(cls, listing_id: int) -> "ContextRef":
        return cls(ContextKind.LISTING, listing_id)

    @classmethod
    def textbook(cls, textbook_id: int) -> "ContextRef":
        return cls(ContextKind.TEXTBOOK, textbook_id)

    @classmethod
    def note(cls, note_id: int) -> "ContextRef":
        return cls(ContextKind.NOTE, note_id)

    def as_fields(self) -> dict[str, int | None]:
        """Return ``listing_id``/``textbook_id``/``note_id`` with only one set."""

        return {
            kind.field_name: (self.id if kind is self.kind else None)
            for kind in ContextKind
        }


__all__ = ["ContextKind", "ContextRef"]
