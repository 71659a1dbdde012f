"""Factory Boy definition for :class:`authcore.models.user.User`."""

from __future__ import annotations

import factory
from authcore.models.user import User
from werkzeug.security import generate_password_hash

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """Build persisted :class:`authcore.models.user.User` instances.

    Pass ``password=...`` to choose the raw password; it is hashed the same
    way the model setter does.
    """

    class Meta:
        model = User

    class Params:
        password = DEFAULT_PASSWORD

    id = factory.Faker("uuid4")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    password_hash = factory.LazyAttribute(lambda o: generate_password_hash(o.password))
    deleted_at = None
