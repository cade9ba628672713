# comments in English; reST docstrings strict
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Client-safe projection of a user (no password hash, no refresh token).

    :param id: User id.
    :type id: int
    :param username: Lowercased handle.
    :type username: str
    :param email: Lowercased email.
    :type email: str
    :param full_name: Display name.
    :type full_name: str
    :param avatar: Avatar URL.
    :type avatar: str
    :param cover_image: Cover image URL or ``""``.
    :type cover_image: str
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> UserPublicOut:
        return cls(
            id=int(row["id"]),
            username=row["username"],
            email=row["email"],
            full_name=row["full_name"],
            avatar=row["avatar"],
            cover_image=row.get("cover_image") or "",
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(frozen=True, slots=True)
class UserAccountOut:
    """
    Projection returned by account updates: the public fields plus ``refresh_token``.

    :param refresh_token: Stored refresh token, ``None`` after logout.
    :type refresh_token: str | None
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str
    refresh_token: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> UserAccountOut:
        public = UserPublicOut.from_row(row)
        return cls(
            id=public.id,
            username=public.username,
            email=public.email,
            full_name=public.full_name,
            avatar=public.avatar,
            cover_image=public.cover_image,
            refresh_token=row.get("refresh_token"),
            created_at=public.created_at,
            updated_at=public.updated_at,
        )
