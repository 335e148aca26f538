"""
Tests for the entitlement gate.
"""

from datetime import datetime, timedelta

import pytest
from freezegun import freeze_time

from carebase.platform.billing.catalog import FeatureKey, PlanType
from carebase.platform.billing.subscriptions import (
    LimitCheck,
    Subscription,
    check_limits,
    get_trial_days_remaining,
    has_feature,
    is_subscription_active,
    is_trial_active,
)


@pytest.fixture
def trial(lifecycle):
    """14-day trial starting 2024-01-15 09:00 UTC."""
    return lifecycle.create_trial("org-1", created_by="owner")


@pytest.fixture
def standard(lifecycle):
    return lifecycle.create_paid("org-1", PlanType.STANDARD, created_by="owner")


@pytest.mark.unit
class TestTrialStatus:
    """Test trial expiry checks."""

    def test_trial_active_before_end(self, trial, clock):
        assert is_trial_active(trial, now=clock.now)
        assert is_trial_active(trial, now=trial.trial_end_date - timedelta(seconds=1))

    def test_trial_expires_at_end_date(self, trial):
        assert not is_trial_active(trial, now=trial.trial_end_date)
        assert not is_trial_active(trial, now=trial.trial_end_date + timedelta(days=1))

    def test_paid_subscription_is_not_a_trial(self, standard, clock):
        assert not is_trial_active(standard, now=clock.now)

    def test_uses_current_time_by_default(self, trial):
        with freeze_time("2024-01-20 00:00:00"):
            assert is_trial_active(trial)
            assert is_subscription_active(trial)

        with freeze_time("2024-02-01 00:00:00"):
            assert not is_trial_active(trial)
            assert not is_subscription_active(trial)


@pytest.mark.unit
class TestTrialDaysRemaining:
    """Test remaining trial day counts."""

    def test_full_trial(self, trial, clock):
        assert get_trial_days_remaining(trial, now=clock.now) == 14

    def test_partial_day_rounds_up(self, trial, clock):
        now = clock.now + timedelta(days=13, hours=1)

        assert get_trial_days_remaining(trial, now=now) == 1

    def test_expired_trial_is_zero(self, trial):
        now = trial.trial_end_date + timedelta(days=3)

        assert get_trial_days_remaining(trial, now=now) == 0

    def test_no_trial_end_date(self, standard, clock):
        assert get_trial_days_remaining(standard, now=clock.now) == 0

    def test_upgrade_clears_remaining_days(self, lifecycle, trial, clock):
        upgraded = lifecycle.change_plan(trial, PlanType.STANDARD, "owner")

        assert get_trial_days_remaining(upgraded, now=clock.now) == 0


@pytest.mark.unit
class TestSubscriptionActive:
    """Test the active check across states."""

    def test_active_paid(self, standard, clock):
        assert is_subscription_active(standard, now=clock.now)

    def test_suspended_is_inactive(self, lifecycle, standard, clock):
        suspended = lifecycle.suspend(standard, "admin")

        assert not is_subscription_active(suspended, now=clock.now)

    def test_cancelled_is_inactive(self, lifecycle, standard, clock):
        cancelled = lifecycle.cancel(standard, "closing", "owner")

        assert not is_subscription_active(cancelled, now=clock.now)


@pytest.mark.unit
class TestHasFeature:
    """Test feature gating."""

    def test_trial_features(self, trial, clock):
        assert has_feature(trial, FeatureKey.PRODUCTS, now=clock.now)
        assert has_feature(trial, FeatureKey.AI_PRODUCTS, now=clock.now)
        assert not has_feature(trial, FeatureKey.COMMUNITY, now=clock.now)

    def test_expired_trial_has_no_features(self, trial):
        expired = trial.trial_end_date + timedelta(minutes=1)

        assert not has_feature(trial, FeatureKey.PRODUCTS, now=expired)
        assert not has_feature(trial, FeatureKey.AI_PRODUCTS, now=expired)

    def test_standard_features(self, standard, clock):
        assert has_feature(standard, FeatureKey.COMMUNITY, now=clock.now)
        assert has_feature(standard, "data_persistence", now=clock.now)
        assert not has_feature(standard, FeatureKey.AI_PRODUCTS, now=clock.now)
        assert not has_feature(standard, FeatureKey.EXTERNAL_API, now=clock.now)

    def test_unknown_feature_denied(self, standard, clock):
        assert not has_feature(standard, "teleportation", now=clock.now)

    def test_suspended_denies_every_feature(self, lifecycle, standard, clock):
        suspended = lifecycle.suspend(standard, "admin")

        for feature in FeatureKey:
            assert not has_feature(suspended, feature, now=clock.now)

    def test_upgrade_grants_new_features(self, lifecycle, standard, clock):
        upgraded = lifecycle.change_plan(standard, PlanType.AI, "admin")

        assert has_feature(upgraded, FeatureKey.AI_REPORTS, now=clock.now)
        assert has_feature(upgraded, FeatureKey.EXTERNAL_API, now=clock.now)


@pytest.mark.unit
class TestCheckLimits:
    """Test capacity flags."""

    def test_active_subscription(self, standard, clock):
        assert check_limits(standard, now=clock.now) == LimitCheck(
            can_add_staff=True, can_add_client=True, storage_available=True
        )

    def test_expired_trial(self, trial):
        limits = check_limits(trial, now=trial.trial_end_date)

        assert not limits.can_add_staff
        assert not limits.can_add_client
        assert not limits.storage_available

    def test_cancelled(self, lifecycle, standard, clock):
        cancelled = lifecycle.cancel(standard, "closing", "owner")

        limits = check_limits(cancelled, now=clock.now)

        assert limits == LimitCheck(
            can_add_staff=False, can_add_client=False, storage_available=False
        )


@pytest.mark.unit
class TestNaiveTimestamps:
    """Test records loaded from stores without timezone support."""

    @pytest.fixture
    def naive_trial(self, trial):
        return Subscription.model_validate(
            {
                **trial.model_dump(),
                "trial_start_date": datetime(2024, 1, 15, 9, 0),
                "trial_end_date": datetime(2024, 1, 29, 9, 0),
                "start_date": datetime(2024, 1, 15, 9, 0),
                "created_at": datetime(2024, 1, 15, 9, 0),
                "updated_at": datetime(2024, 1, 15, 9, 0),
            }
        )

    def test_gate_accepts_naive_record(self, naive_trial):
        with freeze_time("2024-01-20 00:00:00"):
            assert is_trial_active(naive_trial)
            assert is_subscription_active(naive_trial)
            assert has_feature(naive_trial, FeatureKey.PRODUCTS)
            assert check_limits(naive_trial).can_add_staff
            assert get_trial_days_remaining(naive_trial) == 10

    def test_naive_now(self, naive_trial):
        assert is_trial_active(naive_trial, now=datetime(2024, 1, 29, 8, 59))
        assert not is_trial_active(naive_trial, now=datetime(2024, 1, 29, 9, 0))
