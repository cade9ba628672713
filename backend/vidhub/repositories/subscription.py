"""Subscription edge repository."""

from __future__ import annotations

from vidhub.models.subscription import Subscription
from vidhub.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Create ``subscriber -> channel`` edges."""

    model = Subscription

    def _filterable_fields(self):
        return {
            "subscriber_id": Subscription.subscriber_id,
            "channel_id": Subscription.channel_id,
        }

    def subscribe(self, subscriber_id: int, channel_id: int) -> Subscription:
        """Return the edge for the pair, creating it when missing."""
        edge = self.find_one(subscriber_id=subscriber_id, channel_id=channel_id)
        if edge is not None:
            return edge
        return self.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))

