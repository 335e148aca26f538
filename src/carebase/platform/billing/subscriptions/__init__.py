"""Subscription lifecycle, entitlement gate, and persistence boundary."""

from carebase.platform.billing.subscriptions.entitlements import (
    check_limits,
    get_trial_days_remaining,
    has_feature,
    is_subscription_active,
    is_trial_active,
)
from carebase.platform.billing.subscriptions.lifecycle import (
    SubscriptionLifecycle,
    available_transitions,
)
from carebase.platform.billing.subscriptions.models import (
    LimitCheck,
    PlanSnapshot,
    Subscription,
    SubscriptionStatus,
    SubscriptionTransition,
)
from carebase.platform.billing.subscriptions.service import SubscriptionService
from carebase.platform.billing.subscriptions.store import (
    InMemorySubscriptionStore,
    SubscriptionStore,
)

__all__ = [
    "InMemorySubscriptionStore",
    "LimitCheck",
    "PlanSnapshot",
    "Subscription",
    "SubscriptionLifecycle",
    "SubscriptionService",
    "SubscriptionStatus",
    "SubscriptionStore",
    "SubscriptionTransition",
    "available_transitions",
    "check_limits",
    "get_trial_days_remaining",
    "has_feature",
    "is_subscription_active",
    "is_trial_active",
]
