"""Identity lookups backed by the user table."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from campusshare.domain.entities import UserProfile
from campusshare.infrastructure.models import UserModel


class UserRepository:
    """Resolve user identifiers into :class:`UserProfile` objects.

    A missing user is reported as ``None``; database failures propagate as
    ``SQLAlchemyError`` so callers can tell the two apart.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_profile(self, user_id: int) -> UserProfile | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_profiles(self, user_ids: Iterable[int]) -> dict[int, UserProfile]:
        unique_ids = {int(user_id) for user_id in user_ids}
        if not unique_ids:
            return {}
        query = self.session.query(UserModel).filter(UserModel.id.in_(unique_ids))
        return {model.id: self._to_entity(model) for model in query.all()}

    def create(
        self,
        *,
        name: str,
        username: str,
        email: str | None,
        profile_picture: str | None = None,
    ) -> UserProfile:
        model = UserModel(
            name=name,
            username=username,
            email=email,
            profile_picture=profile_picture,
            is_active=True,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> UserProfile:
        return UserProfile(
            id=model.id,
            name=model.name,
            username=model.username,
            email=model.email,
            profile_picture=model.profile_picture,
            is_active=model.is_active,
        )


__all__ = ["UserRepository"]
