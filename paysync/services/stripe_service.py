"""Stripe API boundary for subscription reads and writes."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import stripe

logger = logging.getLogger(__name__)


class StripeService:
    """Thin wrapper around the Stripe SDK used by sync and command adapters.

    Failures surface as ``stripe.StripeError`` subclasses; callers decide whether
    to wrap them.
    """

    def __init__(
        self,
        secret_key: Optional[str],
        api_version: Optional[str] = None,
        max_network_retries: int = 2,
    ) -> None:
        self._configure_stripe(secret_key, api_version, max_network_retries)

    def _configure_stripe(
        self,
        secret_key: Optional[str],
        api_version: Optional[str],
        max_network_retries: int,
    ) -> None:
        """Configure Stripe SDK globals."""
        stripe.api_key = secret_key or None
        if api_version:
            stripe.api_version = api_version
        stripe.max_network_retries = max_network_retries
        if not secret_key:
            logger.warning("STRIPE_SECRET_KEY is not set; Stripe calls will fail")

    def is_connected(self) -> bool:
        """Check if Stripe is properly configured and connected."""
        if not stripe.api_key:
            return False

        try:
            stripe.Account.retrieve()
            return True
        except stripe.StripeError as e:
            logger.debug("Stripe connection check failed: %s", str(e))
            return False

    def retrieve_subscription(
        self,
        subscription_id: str,
        expand: Optional[List[str]] = None,
        stripe_account: Optional[str] = None,
    ) -> stripe.Subscription:
        params: Dict[str, Any] = {}
        if expand:
            params["expand"] = expand
        if stripe_account:
            params["stripe_account"] = stripe_account
        logger.debug("Retrieving Stripe subscription %s", subscription_id)
        return stripe.Subscription.retrieve(subscription_id, **params)

    def update_subscription(
        self,
        subscription_id: str,
        params: Dict[str, Any],
        stripe_account: Optional[str] = None,
    ) -> stripe.Subscription:
        options: Dict[str, Any] = dict(params)
        if stripe_account:
            options["stripe_account"] = stripe_account
        logger.debug("Updating Stripe subscription %s with %s", subscription_id, sorted(params))
        return stripe.Subscription.modify(subscription_id, **options)

    def cancel_subscription(
        self,
        subscription_id: str,
        stripe_account: Optional[str] = None,
    ) -> stripe.Subscription:
        """Cancel a subscription immediately."""
        options: Dict[str, Any] = {}
        if stripe_account:
            options["stripe_account"] = stripe_account
        logger.debug("Cancelling Stripe subscription %s", subscription_id)
        return stripe.Subscription.cancel(subscription_id, **options)

    def construct_event(self, payload: bytes, sig_header: str, webhook_secret: str) -> stripe.Event:
        """Verify a webhook payload signature and parse the event.

        Raises:
            stripe.SignatureVerificationError: If the signature does not match
            ValueError: If the payload is not valid JSON
        """
        return stripe.Webhook.construct_event(payload, sig_header, webhook_secret)
