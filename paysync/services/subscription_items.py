"""Full-replace reconciliation of subscription line items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ..domain.models import RemoteSubscriptionItem, SubscriptionItem


@dataclass(slots=True)
class ItemReplacementPlan:
    """Rows to insert and local item ids to delete, applied as one unit."""

    inserts: List[SubscriptionItem] = field(default_factory=list)
    removals: List[int] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.inserts and not self.removals


def build_items(remote_items: Sequence[RemoteSubscriptionItem]) -> List[SubscriptionItem]:
    return [
        SubscriptionItem(
            processor_id=item.id,
            processor_price=item.price_id,
            quantity=item.quantity,
        )
        for item in remote_items
    ]


def plan_item_replacement(
    existing_items: Sequence[SubscriptionItem],
    remote_items: Sequence[RemoteSubscriptionItem],
) -> ItemReplacementPlan:
    """
    Plan the replacement of a subscription's items with the remote list.

    Existing items are never matched against remote items, even when their
    remote ids coincide: every stored item is removed and every remote item is
    inserted again.
    """
    inserts = build_items(remote_items)
    if not existing_items:
        return ItemReplacementPlan(inserts=inserts)

    removals = [item.id for item in existing_items if item.id is not None]
    return ItemReplacementPlan(inserts=inserts, removals=removals)
