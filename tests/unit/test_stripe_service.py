"""Tests for the Stripe SDK boundary."""

from unittest.mock import patch

import pytest
import stripe

from paysync.services.stripe_service import StripeService


@pytest.fixture(autouse=True)
def restore_stripe_globals():
    saved = (stripe.api_key, stripe.api_version, stripe.max_network_retries)
    yield
    stripe.api_key, stripe.api_version, stripe.max_network_retries = saved


@pytest.fixture
def service():
    return StripeService("sk_test_123", max_network_retries=3)


class TestConfiguration:
    def test_sets_sdk_globals(self):
        StripeService("sk_test_abc", api_version="2024-06-20", max_network_retries=5)
        assert stripe.api_key == "sk_test_abc"
        assert stripe.api_version == "2024-06-20"
        assert stripe.max_network_retries == 5

    def test_missing_key_is_not_connected(self):
        service = StripeService(None)
        assert stripe.api_key is None
        assert service.is_connected() is False

    def test_is_connected(self, service):
        with patch.object(stripe.Account, "retrieve", return_value={"id": "acct_1"}):
            assert service.is_connected() is True

    def test_is_connected_false_on_error(self, service):
        with patch.object(stripe.Account, "retrieve", side_effect=stripe.AuthenticationError("bad key")):
            assert service.is_connected() is False


class TestSubscriptionCalls:
    def test_retrieve(self, service):
        with patch.object(stripe.Subscription, "retrieve", return_value={"id": "sub_1"}) as retrieve:
            result = service.retrieve_subscription("sub_1", expand=["latest_invoice"])

        assert result == {"id": "sub_1"}
        retrieve.assert_called_once_with("sub_1", expand=["latest_invoice"])

    def test_retrieve_connected_account(self, service):
        with patch.object(stripe.Subscription, "retrieve") as retrieve:
            service.retrieve_subscription("sub_1", stripe_account="acct_1")
        retrieve.assert_called_once_with("sub_1", stripe_account="acct_1")

    def test_update(self, service):
        with patch.object(stripe.Subscription, "modify") as modify:
            service.update_subscription("sub_1", {"quantity": 3}, stripe_account="acct_1")
        modify.assert_called_once_with("sub_1", quantity=3, stripe_account="acct_1")

    def test_cancel(self, service):
        with patch.object(stripe.Subscription, "cancel") as cancel:
            service.cancel_subscription("sub_1")
        cancel.assert_called_once_with("sub_1")

    def test_errors_are_not_wrapped(self, service):
        error = stripe.InvalidRequestError("No such subscription", "id")
        with patch.object(stripe.Subscription, "retrieve", side_effect=error):
            with pytest.raises(stripe.InvalidRequestError):
                service.retrieve_subscription("sub_missing")

    def test_construct_event_delegates_to_webhook(self, service):
        with patch.object(stripe.Webhook, "construct_event", return_value={"type": "x"}) as construct:
            assert service.construct_event(b"{}", "sig", "whsec_1") == {"type": "x"}
        construct.assert_called_once_with(b"{}", "sig", "whsec_1")
