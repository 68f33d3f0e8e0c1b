"""User repository."""

from __future__ import annotations

from authgate.models.user import User
from authgate.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`."""

    model = User

    def _updatable_fields(self) -> set[str]:
        return {"name", "activated"}

    def set_activated(self, user_id: int, activated: bool) -> User | None:
        """Toggle the activation flag and flush.

        :returns: The updated user, or ``None`` when it does not exist.
        """
        user = self.get(user_id)
        if user is None:
            return None
        return self.assign_updates(user, {"activated": activated})
