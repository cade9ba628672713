"""Subscription edge between a subscriber and a channel (both users)."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vidhub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Subscription(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Directed edge ``subscriber -> channel``.

    Only read by the channel profile aggregation; rows are written by the
    development seed command.
    """

    __tablename__ = "subscriptions"
    __repr_fields__ = ("subscriber_id", "channel_id")

    subscriber_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    channel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
    )
