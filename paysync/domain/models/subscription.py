"""Local subscription records reconciled from a payment processor."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from ..errors import SubscriptionValidationError


class Processor(str, Enum):
    """Remote billing systems a subscription can belong to."""

    STRIPE = "stripe"


class SubscriptionStatus(str, Enum):
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"
    PAUSED = "paused"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class SubscriptionItem:
    """A single price line on a subscription, keyed by the remote item id."""

    processor_id: str
    processor_price: str
    quantity: int = 1
    id: Optional[int] = None
    subscription_id: Optional[int] = None


@dataclass(slots=True)
class Subscription:
    """
    Subscription record owned by a billable owner.

    Attributes:
        owner_id: Reference to the owning ``Owner``
        processor: Remote system holding the subscription
        processor_id: Remote subscription identifier, unique per processor
        name: Local grouping label (e.g. ``default``)
        processor_plan: Remote plan/price identifier
        quantity: Number of seats
        status: Remote lifecycle status
        trial_ends_at: End of the trial period, if any
        ends_at: Scheduled or final cancellation time, if any
        application_fee_percent: Platform fee for connected accounts
        stripe_account: Connected account the subscription lives on
        prorate: Whether plan swaps create prorations (not persisted)
    """

    owner_id: int
    processor: str
    processor_id: str
    name: str = "default"
    processor_plan: Optional[str] = None
    quantity: int = 1
    status: str = SubscriptionStatus.INCOMPLETE.value
    trial_ends_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    application_fee_percent: Optional[float] = None
    stripe_account: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[SubscriptionItem] = field(default_factory=list)
    prorate: bool = field(default=True, compare=False)

    def is_persisted(self) -> bool:
        return self.id is not None

    def on_trial(self, now: Optional[datetime] = None) -> bool:
        """Check if the trial period is still running."""
        now = now or _utcnow()
        return self.trial_ends_at is not None and now < self.trial_ends_at

    def is_canceled(self) -> bool:
        """Check if a cancellation has been scheduled or has taken effect."""
        return self.ends_at is not None

    def on_grace_period(self, now: Optional[datetime] = None) -> bool:
        """Check if the subscription is canceled but has not reached its end yet."""
        now = now or _utcnow()
        return self.is_canceled() and now < self.ends_at

    def is_active(self, now: Optional[datetime] = None) -> bool:
        now = now or _utcnow()
        return self.ends_at is None or self.on_grace_period(now) or self.on_trial(now)

    def apply(self, attributes: dict) -> None:
        """Assign mapped attributes onto this record."""
        for key, value in attributes.items():
            if not hasattr(self, key) or key in ("id", "items"):
                raise SubscriptionValidationError(f"Unknown subscription attribute: {key}")
            setattr(self, key, value)

    def validate(self) -> None:
        """Raise SubscriptionValidationError if the record cannot be stored."""
        valid_processors = {processor.value for processor in Processor}
        valid_statuses = {status.value for status in SubscriptionStatus}

        if self.processor not in valid_processors:
            raise SubscriptionValidationError(f"Unknown processor: {self.processor!r}")
        if not self.processor_id:
            raise SubscriptionValidationError("Processor id is required")
        if not self.name:
            raise SubscriptionValidationError("Name is required")
        if self.status not in valid_statuses:
            raise SubscriptionValidationError(f"Unknown status: {self.status!r}")
        if self.quantity is None or self.quantity < 0:
            raise SubscriptionValidationError("Quantity must be zero or greater")
        for item in self.items:
            if item.quantity is not None and item.quantity < 0:
                raise SubscriptionValidationError("Item quantity must be zero or greater")

    def __repr__(self) -> str:
        return (
            f"<Subscription id={self.id} processor={self.processor} "
            f"processor_id={self.processor_id} status={self.status}>"
        )
