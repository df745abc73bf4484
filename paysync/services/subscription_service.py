"""Service for subscription lookups and lifecycle commands."""

from typing import List, Optional

import stripe

from paysync.domain.errors import StripeProcessorError, SubscriptionNotFoundError, UnsupportedProcessorError
from paysync.domain.models import Processor, Subscription, SyncResult
from paysync.domain.ports.persistence import SubscriptionStore
from paysync.domain.ports.processor import SubscriptionCommands
from paysync.services.stripe_service import StripeService
from paysync.services.stripe_subscription import StripeSubscription
from paysync.services.subscription_sync import SubscriptionSynchronizer


class SubscriptionService:
    """Service for managing owner subscriptions."""

    def __init__(
        self,
        subscription_repository: SubscriptionStore,
        stripe_service: StripeService,
        synchronizer: SubscriptionSynchronizer,
    ):
        self.subscription_repository = subscription_repository
        self.stripe_service = stripe_service
        self.synchronizer = synchronizer

    def get_subscription(self, subscription_id: int) -> Subscription:
        """
        Get a subscription by local ID.

        Raises:
            SubscriptionNotFoundError: If no subscription has this ID
        """
        subscription = self.subscription_repository.get_by_id(subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundError(f"Subscription {subscription_id} not found")
        return subscription

    def list_owner_subscriptions(self, owner_id: int) -> List[Subscription]:
        """
        List all subscriptions for an owner.

        Args:
            owner_id: Owner ID

        Returns:
            List of Subscription entities, newest first
        """
        return self.subscription_repository.list_by_owner_id(owner_id)

    def commands_for(self, subscription: Subscription) -> SubscriptionCommands:
        """
        Build the command adapter matching the subscription's processor.

        Raises:
            UnsupportedProcessorError: If no adapter exists for the processor
        """
        if subscription.processor == Processor.STRIPE.value:
            return StripeSubscription(subscription, self.stripe_service, self.subscription_repository)
        raise UnsupportedProcessorError(f"No command adapter for processor {subscription.processor!r}")

    def cancel(self, subscription_id: int) -> Subscription:
        """Cancel a subscription at the end of its trial or billing period."""
        return self.commands_for(self.get_subscription(subscription_id)).cancel()

    def cancel_now(self, subscription_id: int) -> Subscription:
        """Cancel a subscription immediately."""
        return self.commands_for(self.get_subscription(subscription_id)).cancel_now()

    def change_quantity(self, subscription_id: int, quantity: int) -> Subscription:
        """
        Request a new quantity from the processor.

        Returns:
            The local subscription, which still shows the old quantity until
            the next sync
        """
        commands = self.commands_for(self.get_subscription(subscription_id))
        commands.change_quantity(quantity)
        return commands.subscription

    def resume(self, subscription_id: int) -> Subscription:
        """
        Resume a subscription that is canceled but still in its grace period.

        Raises:
            GracePeriodError: If the subscription is not in its grace period
        """
        commands = self.commands_for(self.get_subscription(subscription_id))
        commands.resume()
        return commands.subscription

    def swap(self, subscription_id: int, plan: str, prorate: Optional[bool] = None) -> Subscription:
        """Move a subscription to another plan."""
        subscription = self.get_subscription(subscription_id)
        if prorate is not None:
            subscription.prorate = prorate
        commands = self.commands_for(subscription)
        commands.swap(plan)
        return commands.subscription

    def pause(self, subscription_id: int) -> None:
        self.commands_for(self.get_subscription(subscription_id)).pause()

    def resync(self, subscription_id: int) -> SyncResult:
        """
        Fetch the subscription from its processor and reconcile it locally.

        Raises:
            StripeProcessorError: If Stripe cannot be reached or rejects the fetch
        """
        subscription = self.get_subscription(subscription_id)
        try:
            return self.synchronizer.sync(
                subscription.processor_id,
                name=subscription.name,
                stripe_account=subscription.stripe_account,
            )
        except stripe.StripeError as e:
            raise StripeProcessorError.from_stripe_error(e) from e
