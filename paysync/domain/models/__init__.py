"""Domain models for the paysync service."""

from .owner import Owner
from .snapshot import RemoteSubscription, RemoteSubscriptionItem
from .subscription import Processor, Subscription, SubscriptionItem, SubscriptionStatus
from .sync_result import SyncResult, SyncStatus

__all__ = [
    "Owner",
    "Processor",
    "RemoteSubscription",
    "RemoteSubscriptionItem",
    "Subscription",
    "SubscriptionItem",
    "SubscriptionStatus",
    "SyncResult",
    "SyncStatus",
]
