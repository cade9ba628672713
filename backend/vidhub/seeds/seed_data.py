"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from vidhub.models.subscription import Subscription
from vidhub.models.user import User

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

PLACEHOLDER_AVATAR = "https://res.cloudinary.com/demo/image/upload/sample.jpg"

USER_FIXTURES: list[dict[str, str]] = [
    {
        "email": "ann.lee@example.com",
        "username": "annl",
        "full_name": "Ann Lee",
        "password": "devPass123!",
    },
    {
        "email": "omar.haddad@example.com",
        "username": "omarcooks",
        "full_name": "Omar Haddad",
        "password": "strongPass123",
        "cover_image": "https://res.cloudinary.com/demo/image/upload/kitchen.jpg",
    },
    {
        "email": "lena.vogel@example.com",
        "username": "lenatravels",
        "full_name": "Lena Vogel",
        "password": "wander2024",
    },
    {
        "email": "kofi.mensah@example.com",
        "username": "kofiplays",
        "full_name": "Kofi Mensah",
        "password": "pixelPass42",
    },
]

# (subscriber username, channel username)
SUBSCRIPTION_FIXTURES: list[tuple[str, str]] = [
    ("annl", "omarcooks"),
    ("annl", "lenatravels"),
    ("omarcooks", "lenatravels"),
    ("kofiplays", "lenatravels"),
    ("lenatravels", "annl"),
    ("kofiplays", "omarcooks"),
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def seed_users(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create demo channel owners with placeholder media."""
    if verbose:
        LOGGER.info("Seeding users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        for fixture in USER_FIXTURES:
            email = fixture["email"].strip().lower()
            user = session.execute(select(User).filter_by(email=email)).scalar_one_or_none()
            created = user is None
            if user is None:
                user = User(
                    email=email,
                    username=fixture["username"],
                    full_name=fixture["full_name"],
                    avatar=PLACEHOLDER_AVATAR,
                    cover_image=fixture.get("cover_image", ""),
                )
                user.password = fixture["password"]
                session.add(user)
            else:
                user.full_name = fixture["full_name"]
            session.flush()
            _touch(summary, "users", created)

    return summary


def seed_subscriptions(
    database: SQLAlchemy, *, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Create subscription edges between the demo users."""
    if verbose:
        LOGGER.info("Seeding subscriptions...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        wanted = {name for pair in SUBSCRIPTION_FIXTURES for name in pair}
        users = session.execute(select(User).where(User.username.in_(wanted))).scalars()
        by_username = {user.username: user for user in users}
        for subscriber_name, channel_name in SUBSCRIPTION_FIXTURES:
            subscriber = by_username.get(subscriber_name)
            channel = by_username.get(channel_name)
            if subscriber is None or channel is None:
                raise RuntimeError(
                    "Subscription fixture references an unknown user: "
                    f"{subscriber_name} -> {channel_name}"
                )
            _, created = _get_or_create(
                session,
                Subscription,
                subscriber_id=subscriber.id,
                channel_id=channel.id,
            )
            session.flush()
            _touch(summary, "subscriptions", created)

    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders in foreign-key order."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    combined: dict[str, dict[str, int]] = {}
    for func in (seed_users, seed_subscriptions):
        result = func(database, verbose=verbose)
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = [
    "seed_users",
    "seed_subscriptions",
    "run_all",
]
