"""User repository: identifier lookups, projections and the channel aggregate."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import exists, false, func, or_, select
from sqlalchemy.orm import aliased

from vidhub.models.subscription import Subscription
from vidhub.models.user import User
from vidhub.repositories.base import BaseRepository

# Columns safe to hand to any client (no password hash, no refresh token)
PUBLIC_COLUMNS = (
    User.id,
    User.username,
    User.email,
    User.full_name,
    User.avatar,
    User.cover_image,
    User.created_at,
    User.updated_at,
)


def _norm(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().lower()
    return value or None


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Two write paths exist:

    * :meth:`save` flushes a whole ``User`` instance, so model validators
      (lowercasing, email format, required avatar) have already run.
    * :meth:`patch_fields` issues a bare ``UPDATE`` for the columns in
      :meth:`_updatable_fields` and skips validation entirely.

    It NEVER issues tokens or talks to the asset host.
    """

    model = User

    def _filterable_fields(self):
        return {
            "email": User.email,
            "username": User.username,
        }

    def _updatable_fields(self):
        return {"refresh_token", "avatar", "cover_image"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == _norm(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == _norm(username))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def find_by_identifier(
        self, *, username: str | None = None, email: str | None = None
    ) -> User | None:
        """Return the first user matching ``username`` OR ``email``.

        Blank identifiers are ignored; ``None`` is returned when both are blank.

        :param username: Handle to match (case-insensitive).
        :param email: Email to match (case-insensitive).
        :rtype: User | None
        """
        clauses = []
        if (u := _norm(username)) is not None:
            clauses.append(User.username == u)
        if (e := _norm(email)) is not None:
            clauses.append(User.email == e)
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id).limit(1)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email_or_username(self, *, email: str, username: str) -> bool:
        """Return ``True`` when another user already holds ``email`` or ``username``."""
        stmt = select(User.id).where(
            or_(User.email == _norm(email), User.username == _norm(username))
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    # ------------------------------ Projections -------------------------------

    def get_public(self, user_id: int) -> dict[str, Any] | None:
        """Return the client-safe columns of a user as a mapping, or ``None``."""
        stmt = select(*PUBLIC_COLUMNS).where(User.id == user_id)
        row = self.session.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def get_account(self, user_id: int) -> dict[str, Any] | None:
        """Like :meth:`get_public` plus ``refresh_token``."""
        stmt = select(*PUBLIC_COLUMNS, User.refresh_token).where(User.id == user_id)
        row = self.session.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def get_refresh_token(self, user_id: int) -> tuple[bool, str | None]:
        """Return ``(found, stored_refresh_token)`` for ``user_id``."""
        stmt = select(User.refresh_token).where(User.id == user_id)
        row = self.session.execute(stmt).first()
        if row is None:
            return False, None
        return True, row[0]

    # ------------------------------- Writes -----------------------------------

    def save(self, user: User) -> User:
        """Persist ``user`` with full validation and flush.

        :raises sqlalchemy.exc.IntegrityError: On unique collisions.
        """
        self.session.add(user)
        self.flush()
        return user

    def update_password(self, user: User, new_password: str) -> User:
        """Re-hash ``new_password`` onto ``user`` through the model setter and save."""
        user.password = new_password
        return self.save(user)

    # ------------------------------ Aggregates --------------------------------

    def get_channel_profile(self, username: str, viewer_id: int | None) -> dict[str, Any] | None:
        """Return the channel profile of ``username`` with subscription counts.

        One ``SELECT`` with correlated subqueries:

        * ``subscribers_count``: edges where the user is the channel.
        * ``channel_subscribed_to_count``: edges where the user is the subscriber.
        * ``is_subscribed``: ``viewer_id`` holds an edge to this channel.

        :param username: Channel handle (case-insensitive).
        :param viewer_id: Requesting user's id; ``None`` yields ``is_subscribed=False``.
        :returns: Mapping of projected fields, or ``None`` when no user matches.
        """
        subscribers = aliased(Subscription)
        subscribed_to = aliased(Subscription)
        viewer_edge = aliased(Subscription)

        subscribers_count = (
            select(func.count(subscribers.id))
            .where(subscribers.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        subscribed_to_count = (
            select(func.count(subscribed_to.id))
            .where(subscribed_to.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        if viewer_id is None:
            is_subscribed: Any = false()
        else:
            is_subscribed = (
                exists()
                .where(viewer_edge.channel_id == User.id, viewer_edge.subscriber_id == viewer_id)
                .correlate(User)
            )

        stmt = select(
            User.id,
            User.full_name,
            User.username,
            User.email,
            User.avatar,
            User.cover_image,
            subscribers_count.label("subscribers_count"),
            subscribed_to_count.label("channel_subscribed_to_count"),
            is_subscribed.label("is_subscribed"),
        ).where(User.username == _norm(username))

        row = self.session.execute(stmt).mappings().first()
        if row is None:
            return None
        result = dict(row)
        result["subscribers_count"] = int(result["subscribers_count"] or 0)
        result["channel_subscribed_to_count"] = int(result["channel_subscribed_to_count"] or 0)
        result["is_subscribed"] = bool(result["is_subscribed"])
        return result
