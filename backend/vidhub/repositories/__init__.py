"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from vidhub.repositories.base import BaseRepository
from vidhub.repositories.subscription import SubscriptionRepository
from vidhub.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "SubscriptionRepository",
    "UserRepository",
]
