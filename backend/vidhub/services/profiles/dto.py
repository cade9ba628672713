# vidhub/services/profiles/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class UpdateAccountIn:
    """
    Input DTO for account detail updates.

    ``email`` is optional; ``full_name`` and ``username`` are required.
    """

    user_id: int
    full_name: str | None
    username: str | None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class ChannelProfileOut:
    """
    Public channel view with subscription aggregates.

    :param subscribers_count: Users subscribed to this channel.
    :param channel_subscribed_to_count: Channels this user subscribes to.
    :param is_subscribed: Whether the requesting user subscribes to this channel.
    """

    id: int
    full_name: str
    username: str
    email: str
    avatar: str
    cover_image: str
    subscribers_count: int
    channel_subscribed_to_count: int
    is_subscribed: bool

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ChannelProfileOut:
        return cls(
            id=int(row["id"]),
            full_name=row["full_name"],
            username=row["username"],
            email=row["email"],
            avatar=row["avatar"],
            cover_image=row.get("cover_image") or "",
            subscribers_count=int(row["subscribers_count"]),
            channel_subscribed_to_count=int(row["channel_subscribed_to_count"]),
            is_subscribed=bool(row["is_subscribed"]),
        )
