"""Lifecycle commands for subscriptions billed through Stripe."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

import stripe

from ..domain.errors import GracePeriodError, PauseNotSupportedError, StripeProcessorError
from ..domain.models import RemoteSubscription, Subscription, SubscriptionStatus
from ..domain.ports.persistence import SubscriptionStore
from ..domain.ports.processor import SubscriptionProcessorClient
from .subscription_attributes import from_epoch

logger = logging.getLogger(__name__)


class StripeSubscription:
    """Issues commands to Stripe on behalf of a local subscription.

    Cancel commands write the resulting end date locally. Quantity changes,
    resumes and swaps only reach Stripe; the local record catches up on the
    next sync.
    """

    def __init__(
        self,
        subscription: Subscription,
        stripe_service: SubscriptionProcessorClient,
        subscriptions: SubscriptionStore,
    ) -> None:
        self.subscription = subscription
        self._stripe = stripe_service
        self._subscriptions = subscriptions

    # Delegated accessors ----------------------------------------------------
    @property
    def processor_id(self) -> str:
        return self.subscription.processor_id

    @property
    def processor_plan(self) -> Optional[str]:
        return self.subscription.processor_plan

    @property
    def quantity(self) -> int:
        return self.subscription.quantity

    @property
    def name(self) -> str:
        return self.subscription.name

    @property
    def ends_at(self) -> Optional[datetime]:
        return self.subscription.ends_at

    @property
    def trial_ends_at(self) -> Optional[datetime]:
        return self.subscription.trial_ends_at

    @property
    def stripe_account(self) -> Optional[str]:
        return self.subscription.stripe_account

    @property
    def prorate(self) -> bool:
        return self.subscription.prorate

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.subscription.is_active(now)

    def is_canceled(self) -> bool:
        return self.subscription.is_canceled()

    def on_trial(self, now: Optional[datetime] = None) -> bool:
        return self.subscription.on_trial(now)

    def on_grace_period(self, now: Optional[datetime] = None) -> bool:
        return self.subscription.on_grace_period(now)

    def is_paused(self) -> bool:
        """Stripe has no paused state for this integration."""
        return False

    # Remote reads -----------------------------------------------------------
    def retrieve(self, **options: Any) -> stripe.Subscription:
        """Fetch the current Stripe object for this subscription."""
        try:
            return self._stripe.retrieve_subscription(
                self.processor_id,
                expand=options.get("expand"),
                stripe_account=options.get("stripe_account", self.stripe_account),
            )
        except stripe.StripeError as e:
            raise StripeProcessorError.from_stripe_error(e) from e

    # Commands ---------------------------------------------------------------
    def cancel(self) -> Subscription:
        """Cancel at the end of the trial or the current billing period."""
        try:
            stripe_sub = self._stripe.update_subscription(
                self.processor_id,
                {"cancel_at_period_end": True},
                stripe_account=self.stripe_account,
            )
        except stripe.StripeError as e:
            raise StripeProcessorError.from_stripe_error(e) from e

        if self.on_trial():
            self.subscription.ends_at = self.trial_ends_at
        else:
            period_end = RemoteSubscription.from_stripe(stripe_sub).current_period_end
            if period_end is None:
                logger.warning("Stripe returned no period end for %s; ends_at left unchanged", self.processor_id)
            else:
                self.subscription.ends_at = from_epoch(period_end)
        logger.info("Scheduled cancellation of %s at %s", self.processor_id, self.subscription.ends_at)
        return self._subscriptions.save(self.subscription)

    def cancel_now(self) -> Subscription:
        """Cancel immediately."""
        try:
            self._stripe.cancel_subscription(self.processor_id, stripe_account=self.stripe_account)
        except stripe.StripeError as e:
            raise StripeProcessorError.from_stripe_error(e) from e

        self.subscription.ends_at = datetime.now(timezone.utc)
        self.subscription.status = SubscriptionStatus.CANCELED.value
        logger.info("Cancelled %s immediately", self.processor_id)
        return self._subscriptions.save(self.subscription)

    def change_quantity(self, quantity: int) -> None:
        try:
            self._stripe.update_subscription(
                self.processor_id,
                {"quantity": quantity},
                stripe_account=self.stripe_account,
            )
        except stripe.StripeError as e:
            raise StripeProcessorError.from_stripe_error(e) from e
        logger.info("Requested quantity %d for %s", quantity, self.processor_id)

    def pause(self) -> None:
        raise PauseNotSupportedError("Stripe does not support pausing subscriptions")

    def resume(self) -> None:
        """Undo a scheduled cancellation while still in the grace period."""
        if not self.on_grace_period():
            raise GracePeriodError("You can only resume subscriptions within their grace period.")

        try:
            self._stripe.update_subscription(
                self.processor_id,
                {
                    "plan": self.processor_plan,
                    "trial_end": self._trial_end_param(),
                    "cancel_at_period_end": False,
                },
                stripe_account=self.stripe_account,
            )
        except stripe.StripeError as e:
            raise StripeProcessorError.from_stripe_error(e) from e
        logger.info("Resumed %s", self.processor_id)

    def swap(self, plan: str) -> None:
        """Move the subscription to another plan, keeping the quantity."""
        try:
            self._stripe.update_subscription(
                self.processor_id,
                {
                    "cancel_at_period_end": False,
                    "plan": plan,
                    "proration_behavior": "create_prorations" if self.prorate else "none",
                    "trial_end": self._trial_end_param(),
                    "quantity": self.quantity,
                },
                stripe_account=self.stripe_account,
            )
        except stripe.StripeError as e:
            raise StripeProcessorError.from_stripe_error(e) from e
        logger.info("Swapped %s to plan %s", self.processor_id, plan)

    def _trial_end_param(self) -> Union[int, str]:
        if self.on_trial():
            return int(self.trial_ends_at.timestamp())
        return "now"

