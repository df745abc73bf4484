"""Tests for mapping remote subscriptions onto local attributes."""

from datetime import datetime, timedelta, timezone

import pytest

from paysync.domain.models import RemoteSubscription
from paysync.services.subscription_attributes import from_epoch, map_subscription_attributes

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
PERIOD_END = int((NOW + timedelta(days=30)).timestamp())


def snapshot(**values):
    defaults = dict(
        id="sub_123",
        customer="cus_123",
        status="active",
        plan_id="plan_basic",
        quantity=3,
        current_period_end=PERIOD_END,
        application_fee_percent=None,
    )
    defaults.update(values)
    return RemoteSubscription(**defaults)


class TestFromEpoch:
    def test_none_stays_none(self):
        assert from_epoch(None) is None

    def test_returns_aware_utc_datetime(self):
        value = from_epoch(0)
        assert value == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert value.tzinfo is timezone.utc


class TestAlwaysMappedAttributes:
    def test_copies_basic_fields(self):
        """Test that plan, quantity, name, status and fees are always set."""
        attributes = map_subscription_attributes(
            snapshot(application_fee_percent=12.5),
            name="pro",
            stripe_account="acct_123",
            now=NOW,
        )

        assert attributes["processor_plan"] == "plan_basic"
        assert attributes["quantity"] == 3
        assert attributes["name"] == "pro"
        assert attributes["status"] == "active"
        assert attributes["stripe_account"] == "acct_123"
        assert attributes["application_fee_percent"] == 12.5

    def test_trial_end_converted(self):
        trial_end = int((NOW + timedelta(days=3)).timestamp())
        attributes = map_subscription_attributes(snapshot(trial_end=trial_end), name="default", now=NOW)
        assert attributes["trial_ends_at"] == from_epoch(trial_end)

    def test_missing_trial_end_is_none(self):
        attributes = map_subscription_attributes(snapshot(), name="default", now=NOW)
        assert attributes["trial_ends_at"] is None


class TestEndsAt:
    def test_not_set_without_cancellation(self):
        """Test that ends_at is absent so existing values are not cleared."""
        attributes = map_subscription_attributes(snapshot(), name="default", now=NOW)
        assert "ends_at" not in attributes

    def test_cancel_at_period_end_uses_period_end(self):
        attributes = map_subscription_attributes(
            snapshot(cancel_at_period_end=True), name="default", now=NOW
        )
        assert attributes["ends_at"] == from_epoch(PERIOD_END)

    def test_cancel_at_period_end_without_period_end(self):
        """Test that a missing period end leaves ends_at out instead of nulling it."""
        attributes = map_subscription_attributes(
            snapshot(cancel_at_period_end=True, current_period_end=None), name="default", now=NOW
        )
        assert "ends_at" not in attributes

    def test_cancel_at_period_end_on_trial_uses_trial_end(self):
        """Test that a scheduled cancellation during a trial ends with the trial."""
        trial_end = int((NOW + timedelta(days=3)).timestamp())
        attributes = map_subscription_attributes(
            snapshot(cancel_at_period_end=True, trial_end=trial_end),
            name="default",
            now=NOW,
        )
        assert attributes["ends_at"] == from_epoch(trial_end)

    def test_expired_trial_falls_back_to_period_end(self):
        trial_end = int((NOW - timedelta(days=3)).timestamp())
        attributes = map_subscription_attributes(
            snapshot(cancel_at_period_end=True, trial_end=trial_end),
            name="default",
            now=NOW,
        )
        assert attributes["ends_at"] == from_epoch(PERIOD_END)

    def test_ended_at_sets_ends_at(self):
        ended_at = int((NOW - timedelta(hours=1)).timestamp())
        attributes = map_subscription_attributes(snapshot(ended_at=ended_at), name="default", now=NOW)
        assert attributes["ends_at"] == from_epoch(ended_at)

    def test_ended_at_wins_over_cancel_at_period_end(self):
        """Test that a terminal cancellation overrides a scheduled one."""
        ended_at = int((NOW - timedelta(hours=1)).timestamp())
        attributes = map_subscription_attributes(
            snapshot(cancel_at_period_end=True, ended_at=ended_at),
            name="default",
            now=NOW,
        )
        assert attributes["ends_at"] == from_epoch(ended_at)
        assert attributes["ends_at"] != from_epoch(PERIOD_END)

    @pytest.mark.parametrize("status", ["incomplete", "trialing", "past_due", "canceled", "unpaid"])
    def test_status_passed_through(self, status):
        attributes = map_subscription_attributes(snapshot(status=status), name="default", now=NOW)
        assert attributes["status"] == status
