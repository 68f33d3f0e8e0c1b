"""Unit tests for UserRepository."""

import pytest
from authgate.repositories.user import UserRepository
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_get_and_count(self, repo):
        u = UserFactory(name="Alice")
        fetched = repo.get(u.id)
        assert fetched is not None
        assert fetched.name == "Alice"
        assert repo.count() >= 1

    def test_set_activated(self, repo):
        u = UserFactory()
        updated = repo.set_activated(u.id, False)
        assert updated.activated is False
        assert repo.set_activated(999999, True) is None

    def test_safe_update_fields(self, repo):
        """Assign whitelisted fields and reject disallowed keys."""
        u = UserFactory()
        updated = repo.assign_updates(u, {"name": "  New Name "})
        assert updated.name == "New Name"

        with pytest.raises(ValueError):
            repo.assign_updates(u, {"id": 5})
