"""Title lookups for the listing, textbook and note a message is about."""

from __future__ import annotations

from sqlalchemy.orm import Session

from campusshare.domain.entities import ContextKind, ContextRef
from campusshare.infrastructure.database import Base
from campusshare.infrastructure.models import ListingModel, NoteModel, TextbookModel

_MODELS: dict[ContextKind, type[Base]] = {
    ContextKind.LISTING: ListingModel,
    ContextKind.TEXTBOOK: TextbookModel,
    ContextKind.NOTE: NoteModel,
}


class SubjectRepository:
    """Resolve a :class:`ContextRef` into a short human readable title."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_title(self, context: ContextRef) -> str | None:
        """Return the title of ``context`` or ``None`` when it no longer exists."""

        model = self.session.get(_MODELS[context.kind], context.id)
        if model is None:
            return None
        return model.title


__all__ = ["SubjectRepository"]
