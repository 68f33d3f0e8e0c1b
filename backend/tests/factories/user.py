"""Factory Boy definition for :class:`authgate.models.user.User`."""

from __future__ import annotations

import factory
from authgate.models.user import User
from tests.factories import BaseFactory


class UserFactory(BaseFactory):
    """Build persisted, activated :class:`authgate.models.user.User` instances."""

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    name = factory.Faker("name")
    activated = True
