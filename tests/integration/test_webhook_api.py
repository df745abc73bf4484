"""Tests for the Stripe webhook endpoint."""

import json

import stripe

WEBHOOK_URL = "/api/stripe/webhook"
SUBSCRIPTION_ID = "sub_00000000000000"


def subscription_event(event_type="customer.subscription.updated"):
    return {
        "id": "evt_123",
        "type": event_type,
        "data": {"object": {"id": SUBSCRIPTION_ID, "object": "subscription"}},
    }


def post_event(client, event):
    return client.post(
        WEBHOOK_URL,
        content=json.dumps(event),
        headers={"stripe-signature": "t=1,v1=abc"},
    )


class TestWebhookEndpoint:
    def test_subscription_event_is_synced(
        self, client, stripe_service, subscription_repository, owner, make_payload
    ):
        event = subscription_event()
        stripe_service.construct_event.return_value = event
        stripe_service.retrieve_subscription.return_value = make_payload(quantity=2)

        response = post_event(client, event)

        assert response.status_code == 200
        assert response.json() == {"status": "reconciled", "subscription": SUBSCRIPTION_ID}
        stored = subscription_repository.get_by_processor_id("stripe", SUBSCRIPTION_ID)
        assert stored.owner_id == owner.id
        assert stored.quantity == 2

    def test_deleted_event_marks_subscription_ended(
        self, client, stripe_service, subscription_repository, owner, make_payload
    ):
        ended_at = 1_700_000_000
        stripe_service.construct_event.return_value = subscription_event("customer.subscription.deleted")
        stripe_service.retrieve_subscription.return_value = make_payload(status="canceled", ended_at=ended_at)

        response = post_event(client, subscription_event("customer.subscription.deleted"))

        assert response.status_code == 200
        stored = subscription_repository.get_by_processor_id("stripe", SUBSCRIPTION_ID)
        assert stored.status == "canceled"
        assert int(stored.ends_at.timestamp()) == ended_at

    def test_unknown_owner_is_acknowledged(self, client, stripe_service, subscription_repository, make_payload):
        stripe_service.construct_event.return_value = subscription_event()
        stripe_service.retrieve_subscription.return_value = make_payload(customer="cus_unknown")

        response = post_event(client, subscription_event())

        assert response.status_code == 200
        assert response.json()["status"] == "skipped"
        assert subscription_repository.count() == 0

    def test_other_events_are_ignored(self, client, stripe_service):
        stripe_service.construct_event.return_value = {"id": "evt_1", "type": "invoice.paid", "data": {"object": {}}}

        response = post_event(client, {"type": "invoice.paid"})

        assert response.json() == {"status": "ignored"}
        stripe_service.retrieve_subscription.assert_not_called()

    def test_invalid_signature(self, client, stripe_service):
        stripe_service.construct_event.side_effect = stripe.SignatureVerificationError("bad signature", "t=1,v1=abc")

        response = post_event(client, subscription_event())

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid signature"

    def test_invalid_payload(self, client, stripe_service):
        stripe_service.construct_event.side_effect = ValueError("not json")

        response = client.post(WEBHOOK_URL, content=b"not json", headers={"stripe-signature": "x"})

        assert response.status_code == 400

    def test_fetch_failure_asks_for_redelivery(self, client, stripe_service, owner):
        stripe_service.construct_event.return_value = subscription_event()
        stripe_service.retrieve_subscription.side_effect = stripe.APIConnectionError("network down")

        response = post_event(client, subscription_event())

        assert response.status_code == 500
        assert response.json() == {"status": "failed", "subscription": SUBSCRIPTION_ID}

    def test_missing_secret_ignores_events(self, client, container, stripe_service):
        container.settings.stripe_webhook_secret = None

        response = post_event(client, subscription_event())

        assert response.json() == {"status": "ignored"}
        stripe_service.construct_event.assert_not_called()
        stripe_service.retrieve_subscription.assert_not_called()

    def test_connected_account_is_forwarded(self, client, stripe_service, owner, make_payload):
        event = dict(subscription_event(), account="acct_123")
        stripe_service.construct_event.return_value = event
        stripe_service.retrieve_subscription.return_value = make_payload()

        post_event(client, event)

        assert stripe_service.retrieve_subscription.call_args.kwargs["stripe_account"] == "acct_123"

    def test_sdk_event_and_subscription(self, client, stripe_service, subscription_repository, owner, make_payload):
        """Test the endpoint with objects shaped exactly as the Stripe SDK returns them."""
        event = dict(subscription_event(), account="acct_123")
        stripe_service.construct_event.return_value = stripe.Event.construct_from(event, "sk_test_123")
        stripe_service.retrieve_subscription.return_value = stripe.Subscription.construct_from(
            make_payload(quantity=5), "sk_test_123"
        )

        response = post_event(client, event)

        assert response.status_code == 200
        assert response.json() == {"status": "reconciled", "subscription": SUBSCRIPTION_ID}
        assert stripe_service.retrieve_subscription.call_args.kwargs["stripe_account"] == "acct_123"
        assert subscription_repository.get_by_processor_id("stripe", SUBSCRIPTION_ID).quantity == 5
