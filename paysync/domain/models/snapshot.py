"""Read-only views of remote subscription objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple


def to_mapping(obj: Any) -> Mapping[str, Any]:
    """Return a plain dict for Stripe SDK objects, which are not dicts on current SDKs."""
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return obj


def _object_id(value: Any) -> Optional[str]:
    """Return the id of an expandable field, which is either an id or an object."""
    if value is None:
        return None
    value = to_mapping(value)
    if isinstance(value, Mapping):
        return value.get("id")
    return str(value)


@dataclass(frozen=True)
class RemoteSubscriptionItem:
    id: str
    price_id: Optional[str]
    quantity: int = 1
    current_period_end: Optional[int] = None

    @classmethod
    def from_stripe(cls, obj: Mapping[str, Any]) -> "RemoteSubscriptionItem":
        obj = to_mapping(obj)
        quantity = obj.get("quantity")
        return cls(
            id=obj["id"],
            price_id=_object_id(obj.get("price")) or _object_id(obj.get("plan")),
            quantity=1 if quantity is None else int(quantity),
            current_period_end=obj.get("current_period_end"),
        )


@dataclass(frozen=True)
class RemoteSubscription:
    """
    Snapshot of a processor subscription at fetch time.

    Timestamps are kept as epoch seconds, exactly as the processor sends them.
    ``items`` is ``None`` when the object carried no line-item data at all, which
    is different from an empty list of items.
    """

    id: str
    customer: Optional[str]
    status: str
    plan_id: Optional[str] = None
    quantity: int = 1
    trial_end: Optional[int] = None
    cancel_at_period_end: bool = False
    current_period_end: Optional[int] = None
    ended_at: Optional[int] = None
    application_fee_percent: Optional[float] = None
    items: Optional[Tuple[RemoteSubscriptionItem, ...]] = None

    @classmethod
    def from_stripe(cls, obj: Mapping[str, Any]) -> "RemoteSubscription":
        """Build a snapshot from a ``stripe.Subscription`` or a webhook payload dict."""
        obj = to_mapping(obj)
        items_obj = obj.get("items")
        items: Optional[Tuple[RemoteSubscriptionItem, ...]] = None
        if isinstance(items_obj, Mapping) and items_obj.get("data") is not None:
            items = tuple(RemoteSubscriptionItem.from_stripe(item) for item in items_obj["data"])

        current_period_end = obj.get("current_period_end")
        if current_period_end is None and items:
            current_period_end = items[0].current_period_end

        quantity = obj.get("quantity")
        return cls(
            id=obj["id"],
            customer=_object_id(obj.get("customer")),
            status=obj.get("status"),
            plan_id=_object_id(obj.get("plan")),
            quantity=1 if quantity is None else int(quantity),
            trial_end=obj.get("trial_end"),
            cancel_at_period_end=bool(obj.get("cancel_at_period_end")),
            current_period_end=current_period_end,
            ended_at=obj.get("ended_at"),
            application_fee_percent=obj.get("application_fee_percent"),
            items=items,
        )

    @property
    def item_list(self) -> List[RemoteSubscriptionItem]:
        return list(self.items or ())
