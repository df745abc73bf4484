from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol

from ..models import Owner, Subscription, SubscriptionItem

if TYPE_CHECKING:
    from ...services.subscription_items import ItemReplacementPlan


class OwnerStore(Protocol):
    """Lookup of billable owners by processor customer."""

    def find_billable(self, processor: str, processor_id: str) -> Optional[Owner]:
        ...

    def get_by_id(self, owner_id: int) -> Optional[Owner]:
        ...


class SubscriptionStore(Protocol):
    """Persistence functions for subscriptions and their line items."""

    def find_or_initialize(self, owner: Owner, processor: str, processor_id: str) -> Subscription:
        """Return the stored subscription or a new unsaved one bound to ``owner``."""
        ...

    def save(self, subscription: Subscription) -> Subscription:
        ...

    def apply_item_plan(self, subscription: Subscription, plan: ItemReplacementPlan) -> List[SubscriptionItem]:
        """Apply removals and inserts as one transaction."""
        ...

    def get_by_id(self, subscription_id: int) -> Optional[Subscription]:
        ...

    def get_by_processor_id(self, processor: str, processor_id: str) -> Optional[Subscription]:
        ...

    def list_by_owner_id(self, owner_id: int) -> List[Subscription]:
        ...
