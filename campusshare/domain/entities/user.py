"""Domain entity describing the public profile of a user."""

from dataclasses import dataclass


@dataclass
class UserProfile:
    """Identity attributes needed to address and label a user."""

    id: int
    name: str
    username: str
    email: str | None
    profile_picture: str | None = None
    is_active: bool = True

    @property
    def display_name(self) -> str:
        """Return the name shown to other users."""

        return self.username or self.name
