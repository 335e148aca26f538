"""
Billing engine test fixtures.

Provides reusable products, a pinned clock, and a lifecycle/service pair
backed by the in-memory store.
"""

from datetime import UTC, datetime

import pytest

from carebase.platform.billing.catalog.models import Product, ProductPricing
from carebase.platform.billing.config import BillingConfig, SubscriptionConfig
from carebase.platform.billing.subscriptions.lifecycle import SubscriptionLifecycle
from carebase.platform.billing.subscriptions.service import SubscriptionService
from carebase.platform.billing.subscriptions.store import InMemorySubscriptionStore

FIXED_NOW = datetime(2024, 1, 15, 9, 0, tzinfo=UTC)


class MutableClock:
    """Clock the tests can move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return MutableClock(FIXED_NOW)


@pytest.fixture
def incident_report_product():
    """Add-on with an AI variant."""
    return Product(
        id="incident_report",
        display_name="Incident Reports",
        pricing=ProductPricing(standard=2000, ai=500),
    )


@pytest.fixture
def shift_product():
    """Add-on without an AI variant."""
    return Product(
        id="shift_management",
        display_name="Shift Management",
        pricing=ProductPricing(standard=1500),
    )


@pytest.fixture
def billing_config():
    return BillingConfig(subscription=SubscriptionConfig(conflict_retry_attempts=3))


@pytest.fixture
def lifecycle(clock, billing_config):
    return SubscriptionLifecycle(config=billing_config.subscription, clock=clock)


@pytest.fixture
def store():
    return InMemorySubscriptionStore()


@pytest.fixture
def service(store, lifecycle, billing_config):
    return SubscriptionService(store, lifecycle=lifecycle, config=billing_config)
