"""Persistence helpers for conversation threads."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campusshare.domain.entities import ContextKind, ContextRef, Conversation, ordered_pair
from campusshare.infrastructure.models import ConversationModel
from campusshare.utils import from_storage_datetime, now_in_app_timezone, to_storage_datetime

logger = logging.getLogger(__name__)


class ConversationRepository:
    """Keep exactly one conversation per participant pair and context."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, conversation_id: int) -> Conversation | None:
        model = self.session.get(ConversationModel, conversation_id)
        return self._to_entity(model) if model else None

    def find(
        self, first_user_id: int, second_user_id: int, context: ContextRef
    ) -> Conversation | None:
        model = self._find_model(ordered_pair(first_user_id, second_user_id), context)
        return self._to_entity(model) if model else None

    def list_for_user(self, user_id: int) -> Sequence[Conversation]:
        query = (
            self.session.query(ConversationModel)
            .filter(
                or_(
                    ConversationModel.participant_low_id == user_id,
                    ConversationModel.participant_high_id == user_id,
                )
            )
            .order_by(ConversationModel.updated_at.desc(), ConversationModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def upsert(
        self,
        first_user_id: int,
        second_user_id: int,
        context: ContextRef,
        *,
        last_message_id: int | None = None,
        touched_at: datetime | None = None,
        commit: bool = True,
    ) -> Conversation:
        """Create the conversation for the pair and context, or update it.

        When ``last_message_id`` is given the conversation points at it and its
        ``updated_at`` moves to ``touched_at``. A concurrent insert for the same
        key surfaces as an ``IntegrityError`` on the unique constraint; the
        savepoint is rolled back and the winner's row is updated instead.
        """

        pair = ordered_pair(first_user_id, second_user_id)
        touched = to_storage_datetime(touched_at or now_in_app_timezone())

        model = self._find_model(pair, context)
        if model is None:
            model = self._insert(pair, context, last_message_id, touched)
        elif last_message_id is not None:
            model.last_message_id = last_message_id
            model.updated_at = touched
            self.session.add(model)

        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return self._to_entity(model)

    def _insert(
        self,
        pair: tuple[int, int],
        context: ContextRef,
        last_message_id: int | None,
        touched: datetime | None,
    ) -> ConversationModel:
        model = ConversationModel(
            participant_low_id=pair[0],
            participant_high_id=pair[1],
            context_type=context.kind.value,
            context_id=context.id,
            last_message_id=last_message_id,
            created_at=touched,
            updated_at=touched,
        )
        try:
            with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError:
            logger.info(
                "Conversation for users %s and %s about %s %s was created concurrently",
                pair[0],
                pair[1],
                context.kind.value,
                context.id,
            )
            existing = self._find_model(pair, context)
            if existing is None:
                raise
            if last_message_id is not None:
                existing.last_message_id = last_message_id
                existing.updated_at = touched
                self.session.add(existing)
            return existing
        return model

    def _find_model(
        self, pair: tuple[int, int], context: ContextRef
    ) -> ConversationModel | None:
        return (
            self.session.query(ConversationModel)
            .filter(ConversationModel.participant_low_id == pair[0])
            .filter(ConversationModel.participant_high_id == pair[1])
            .filter(ConversationModel.context_type == context.kind.value)
            .filter(ConversationModel.context_id == context.id)
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: ConversationModel) -> Conversation:
        return Conversation(
            id=model.id,
            participant_ids=(model.participant_low_id, model.participant_high_id),
            context=ContextRef(ContextKind(model.context_type), model.context_id),
            last_message_id=model.last_message_id,
            created_at=from_storage_datetime(model.created_at),
            updated_at=from_storage_datetime(model.updated_at),
        )


__all__ = ["ConversationRepository"]
