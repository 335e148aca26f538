"""
Entitlement gate.

Read-only predicates the application uses to allow or deny feature-gated
actions. Callers should go through these instead of reading
``Subscription.status``, since an expired trial still carries the ``trial``
status until something transitions it.
"""

import math
from datetime import UTC, datetime, timedelta

from carebase.platform.billing.catalog.models import FeatureKey
from carebase.platform.billing.subscriptions.models import (
    LimitCheck,
    Subscription,
    SubscriptionStatus,
)

_DAY = timedelta(days=1)


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    return now if now.tzinfo is not None else now.replace(tzinfo=UTC)


def is_trial_active(subscription: Subscription, now: datetime | None = None) -> bool:
    """True while a trial subscription has not reached its end date."""
    if subscription.status != SubscriptionStatus.TRIAL:
        return False
    if subscription.trial_end_date is None:
        return False
    return subscription.trial_end_date > _now(now)


def is_subscription_active(subscription: Subscription, now: datetime | None = None) -> bool:
    """Trials count while unexpired; otherwise only ``active`` counts."""
    if subscription.status == SubscriptionStatus.TRIAL:
        return is_trial_active(subscription, now)
    return subscription.status == SubscriptionStatus.ACTIVE


def get_trial_days_remaining(subscription: Subscription, now: datetime | None = None) -> int:
    """Whole days left in the trial, rounded up; never negative."""
    if subscription.trial_end_date is None:
        return 0
    remaining = (subscription.trial_end_date - _now(now)) / _DAY
    return max(0, math.ceil(remaining))


def has_feature(
    subscription: Subscription, feature: FeatureKey | str, now: datetime | None = None
) -> bool:
    """True when the subscription is active and its plan snapshot grants ``feature``."""
    if not is_subscription_active(subscription, now):
        return False
    key = feature.value if isinstance(feature, FeatureKey) else feature
    return subscription.features.get(key, False) is True


def check_limits(subscription: Subscription, now: datetime | None = None) -> LimitCheck:
    """
    Capacity flags for the subscription.

    Usage counts are not compared against ``max_staff``, ``max_clients`` or
    ``storage_limit`` here; the calling feature owns that comparison. Each
    flag reflects whether the subscription is active.
    """
    active = is_subscription_active(subscription, now)
    return LimitCheck(can_add_staff=active, can_add_client=active, storage_available=active)
