"""Shared fixtures for paysync tests."""

import time
from unittest.mock import MagicMock

import pytest

from paysync.infrastructure.repositories.owner_repository import OwnerRepository
from paysync.infrastructure.repositories.subscription_repository import SubscriptionRepository
from paysync.services.stripe_service import StripeService
from paysync.services.subscription_sync import SubscriptionSynchronizer

DAY = 24 * 60 * 60
CUSTOMER_ID = "cus_00000000000000"
SUBSCRIPTION_ID = "sub_00000000000000"


def stripe_subscription_payload(**values):
    """Build a Stripe subscription object shaped like a webhook ``data.object``."""
    now = int(time.time())
    payload = {
        "id": SUBSCRIPTION_ID,
        "object": "subscription",
        "customer": CUSTOMER_ID,
        "status": "active",
        "plan": {"id": "FFBEGINNER_00000000000000", "object": "plan"},
        "quantity": 1,
        "trial_end": None,
        "cancel_at_period_end": False,
        "current_period_start": now - DAY,
        "current_period_end": now + 29 * DAY,
        "ended_at": None,
        "application_fee_percent": None,
        "items": {
            "object": "list",
            "data": [
                {
                    "id": "si_00000000000001",
                    "object": "subscription_item",
                    "price": {"id": "price_000000000000000000000001", "object": "price"},
                    "quantity": 1,
                }
            ],
        },
    }
    payload.update(values)
    return payload


@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh SQLite database for each test."""
    return str(tmp_path / "paysync.db")


@pytest.fixture
def owner_repository(db_path):
    return OwnerRepository(db_path)


@pytest.fixture
def subscription_repository(db_path):
    return SubscriptionRepository(db_path)


@pytest.fixture
def owner(owner_repository):
    """Owner linked to the Stripe customer used by the sample payloads."""
    return owner_repository.create(
        email="gob@bluth.com",
        processor="stripe",
        processor_id=CUSTOMER_ID,
    )


@pytest.fixture
def stripe_service():
    """Mock Stripe boundary; no network calls are made in tests."""
    return MagicMock(spec=StripeService)


@pytest.fixture
def synchronizer(stripe_service, owner_repository, subscription_repository):
    return SubscriptionSynchronizer(
        stripe_service,
        owner_repository,
        subscription_repository,
        default_name="default",
    )


@pytest.fixture
def make_payload():
    """Factory for Stripe subscription payloads; keyword arguments override fields."""
    return stripe_subscription_payload
