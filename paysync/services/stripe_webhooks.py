"""Routing of Stripe webhook events to subscription sync."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..domain.models import SyncResult
from ..domain.models.snapshot import to_mapping
from .subscription_sync import SubscriptionSynchronizer

logger = logging.getLogger(__name__)

SUBSCRIPTION_EVENTS = frozenset(
    {
        "customer.subscription.created",
        "customer.subscription.updated",
        "customer.subscription.deleted",
        "customer.subscription.trial_will_end",
    }
)


class StripeWebhookHandler:
    """Dispatches verified Stripe events to the synchronizer."""

    def __init__(self, synchronizer: SubscriptionSynchronizer) -> None:
        self._synchronizer = synchronizer

    def handles(self, event_type: str) -> bool:
        return event_type in SUBSCRIPTION_EVENTS

    def handle(self, event: Mapping[str, Any]) -> Optional[SyncResult]:
        """
        Handle one Stripe event.

        The subscription is fetched again instead of trusting the event payload,
        so late or duplicated deliveries still converge on the current state.

        Returns:
            The sync result, or None for event types that are ignored
        """
        event = to_mapping(event)
        event_type = event["type"]
        if not self.handles(event_type):
            logger.debug("Ignoring Stripe event %s (%s)", event.get("id"), event_type)
            return None

        subscription_id = event["data"]["object"]["id"]
        logger.info("Handling Stripe event %s for subscription %s", event_type, subscription_id)
        return self._synchronizer.try_sync(subscription_id, stripe_account=event.get("account"))
