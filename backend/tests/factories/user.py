"""Factory Boy definition for :class:`vidhub.models.user.User`."""

from __future__ import annotations

import factory
from tests.factories import BaseFactory
from werkzeug.security import generate_password_hash

from vidhub.models.user import User

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`vidhub.models.user.User` instances.

    Notes
    -----
    - ``password`` is a factory parameter; the hash is computed before the
      flush so a fresh user carries no pending changes.
    - ``refresh_token`` starts empty, as for a user who never logged in.
    """

    class Meta:
        model = User

    class Params:
        password = DEFAULT_PASSWORD

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    full_name = factory.LazyAttribute(lambda o: o.username.capitalize())
    avatar = factory.LazyAttribute(lambda o: f"https://assets.test/vidhub/{o.username}.png")
    cover_image = ""
    password_hash = factory.LazyAttribute(lambda o: generate_password_hash(o.password))
