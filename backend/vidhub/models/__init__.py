from vidhub.models.subscription import Subscription
from vidhub.models.user import User

__all__ = [
    "Subscription",
    "User",
]
