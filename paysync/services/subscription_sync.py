"""Reconciliation of remote Stripe subscriptions into local records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

import stripe

from ..domain.errors import ProcessorError, SubscriptionValidationError
from ..domain.models import Processor, RemoteSubscription, SyncResult
from ..domain.ports.persistence import OwnerStore, SubscriptionStore
from ..domain.ports.processor import SubscriptionProcessorClient
from .subscription_attributes import map_subscription_attributes
from .subscription_items import plan_item_replacement

logger = logging.getLogger(__name__)

SYNC_EXPAND = ["pending_setup_intent", "latest_invoice.payment_intent"]


class SubscriptionSynchronizer:
    """Brings a local subscription in line with its Stripe counterpart."""

    def __init__(
        self,
        stripe_service: SubscriptionProcessorClient,
        owners: OwnerStore,
        subscriptions: SubscriptionStore,
        default_name: str = "default",
    ) -> None:
        self._stripe = stripe_service
        self._owners = owners
        self._subscriptions = subscriptions
        self._default_name = default_name

    def sync(
        self,
        subscription_id: str,
        snapshot: Optional[Union[RemoteSubscription, Mapping[str, Any]]] = None,
        name: Optional[str] = None,
        stripe_account: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SyncResult:
        """
        Reconcile one Stripe subscription into local state.

        Args:
            subscription_id: Stripe subscription ID
            snapshot: Already fetched subscription object, skips the API call
            name: Local subscription name, defaults to the configured product name
            stripe_account: Connected account to fetch the subscription from
            now: Reference time for trial handling

        Returns:
            RECONCILED with the stored subscription, or SKIPPED when the Stripe
            customer has no local owner

        Raises:
            stripe.StripeError: If fetching the subscription fails
            SubscriptionValidationError: If the mapped attributes cannot be stored
        """
        if snapshot is None:
            snapshot = self._stripe.retrieve_subscription(
                subscription_id,
                expand=SYNC_EXPAND,
                stripe_account=stripe_account,
            )
        if not isinstance(snapshot, RemoteSubscription):
            snapshot = RemoteSubscription.from_stripe(snapshot)

        owner = self._owners.find_billable(Processor.STRIPE.value, snapshot.customer)
        if owner is None:
            logger.info(
                "Skipping sync of %s: no owner for Stripe customer %s",
                snapshot.id,
                snapshot.customer,
            )
            return SyncResult.skipped(snapshot.id, f"no owner for customer {snapshot.customer}")

        attributes = map_subscription_attributes(
            snapshot,
            name=name or self._default_name,
            stripe_account=owner.stripe_account,
            now=now,
        )

        subscription = self._subscriptions.find_or_initialize(owner, Processor.STRIPE.value, snapshot.id)
        subscription.apply(attributes)
        self._subscriptions.save(subscription)

        # Items need a stored subscription row to attach to
        if subscription.is_persisted() and snapshot.items is not None:
            plan = plan_item_replacement(subscription.items, snapshot.item_list)
            if not plan.is_empty():
                self._subscriptions.apply_item_plan(subscription, plan)

        logger.info(
            "Synced Stripe subscription %s (status=%s, items=%d)",
            subscription.processor_id,
            subscription.status,
            len(subscription.items),
        )
        return SyncResult.reconciled(subscription)

    def try_sync(self, subscription_id: str, **kwargs: Any) -> SyncResult:
        """Run ``sync`` and report failures as a FAILED result instead of raising."""
        try:
            return self.sync(subscription_id, **kwargs)
        except (stripe.StripeError, ProcessorError, SubscriptionValidationError) as exc:
            logger.error("Failed to sync Stripe subscription %s", subscription_id, exc_info=True)
            return SyncResult.failed(subscription_id, exc)

    def sync_many(self, subscription_ids: List[str], name: Optional[str] = None) -> List[SyncResult]:
        return [self.try_sync(subscription_id, name=name) for subscription_id in subscription_ids]
