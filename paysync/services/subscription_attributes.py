"""Mapping of remote subscription snapshots onto local subscription attributes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..domain.models import RemoteSubscription


def from_epoch(value: Optional[int]) -> Optional[datetime]:
    """Convert an epoch-seconds timestamp to an aware UTC datetime."""
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def map_subscription_attributes(
    snapshot: RemoteSubscription,
    name: str,
    stripe_account: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the local attribute set for a remote subscription.

    Args:
        snapshot: Remote subscription at fetch time
        name: Local name to store on the subscription
        stripe_account: Connected account of the owner, if any
        now: Reference time used to decide whether a trial is still running

    Returns:
        Attributes to assign on the local subscription. ``ends_at`` is only
        present when the snapshot schedules or records a cancellation, so an
        existing value is never reset to None.
    """
    now = now or datetime.now(timezone.utc)
    trial_ends_at = from_epoch(snapshot.trial_end)

    attributes: Dict[str, Any] = {
        "application_fee_percent": snapshot.application_fee_percent,
        "processor_plan": snapshot.plan_id,
        "quantity": snapshot.quantity,
        "name": name,
        "status": snapshot.status,
        "stripe_account": stripe_account,
        "trial_ends_at": trial_ends_at,
    }

    # Cancelling in the future: at trial end while trialing, else at period end
    if snapshot.cancel_at_period_end:
        if trial_ends_at is not None and now < trial_ends_at:
            attributes["ends_at"] = trial_ends_at
        elif snapshot.current_period_end is not None:
            attributes["ends_at"] = from_epoch(snapshot.current_period_end)

    # Fully cancelled
    if snapshot.ended_at:
        attributes["ends_at"] = from_epoch(snapshot.ended_at)

    return attributes
