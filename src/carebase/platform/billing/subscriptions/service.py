"""
Subscription service.

Runs lifecycle transitions as read-modify-write cycles against a
SubscriptionStore. A write conflict restarts the whole cycle from a fresh
read; after the configured number of attempts the conflict is raised.
"""

from collections.abc import Callable
from datetime import date, datetime

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from carebase.platform.billing.catalog.models import PlanType
from carebase.platform.billing.config import BillingConfig, get_billing_config
from carebase.platform.billing.exceptions import (
    ConcurrentModificationError,
    SubscriptionNotFoundError,
)
from carebase.platform.billing.pricing.calculator import (
    calculate_fee_for_usage,
    quote_plan_change,
)
from carebase.platform.billing.pricing.models import (
    BillingUsage,
    PriceChangeQuote,
    PricingCalculation,
)
from carebase.platform.billing.subscriptions.lifecycle import SubscriptionLifecycle
from carebase.platform.billing.subscriptions.models import Subscription
from carebase.platform.billing.subscriptions.store import SubscriptionStore
from carebase.platform.logging import get_logger

logger = get_logger(__name__)


def _log_conflict(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "subscription.write_conflict",
        attempt=retry_state.attempt_number,
        error=str(exc) if exc else None,
    )


class SubscriptionService:
    """Orchestrates subscription transitions and pricing for organizations."""

    def __init__(
        self,
        store: SubscriptionStore,
        lifecycle: SubscriptionLifecycle | None = None,
        config: BillingConfig | None = None,
    ) -> None:
        self.store = store
        self.config = config or get_billing_config()
        self.lifecycle = lifecycle or SubscriptionLifecycle(config=self.config.subscription)

    def get(self, organization_id: str) -> Subscription:
        """Load an organization's subscription or raise SubscriptionNotFoundError."""
        subscription = self.store.load(organization_id)
        if subscription is None:
            raise SubscriptionNotFoundError(
                f"No subscription for organization {organization_id}",
                organization_id=organization_id,
            )
        return subscription

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_trial(
        self, organization_id: str, created_by: str, trial_days: int | None = None
    ) -> Subscription:
        return self._write_cycle(
            lambda: self.lifecycle.create_trial(
                organization_id,
                created_by,
                trial_days=trial_days,
                existing=self.store.load(organization_id),
            )
        )

    def create_paid(
        self,
        organization_id: str,
        plan: PlanType | str,
        created_by: str,
        auto_renewal: bool = True,
    ) -> Subscription:
        return self._write_cycle(
            lambda: self.lifecycle.create_paid(
                organization_id,
                plan,
                created_by,
                auto_renewal=auto_renewal,
                existing=self.store.load(organization_id),
            )
        )

    def change_plan(
        self, organization_id: str, plan: PlanType | str, updated_by: str
    ) -> Subscription:
        return self._write_cycle(
            lambda: self.lifecycle.change_plan(self.get(organization_id), plan, updated_by)
        )

    def cancel(self, organization_id: str, reason: str, updated_by: str) -> Subscription:
        return self._write_cycle(
            lambda: self.lifecycle.cancel(self.get(organization_id), reason, updated_by)
        )

    def suspend(self, organization_id: str, updated_by: str) -> Subscription:
        return self._write_cycle(
            lambda: self.lifecycle.suspend(self.get(organization_id), updated_by)
        )

    def resume(self, organization_id: str, updated_by: str) -> Subscription:
        return self._write_cycle(
            lambda: self.lifecycle.resume(self.get(organization_id), updated_by)
        )

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def calculate_fee(self, organization_id: str, usage: BillingUsage) -> PricingCalculation:
        """Monthly fee for the organization's current plan and ``usage``."""
        subscription = self.get(organization_id)
        return calculate_fee_for_usage(
            subscription.plan,
            usage,
            catalog=self.lifecycle.catalog,
            tax_rate=self.config.tax.rate,
        )

    def preview_plan_change(
        self,
        organization_id: str,
        new_plan: PlanType | str,
        usage: BillingUsage,
        effective_date: date | datetime | None = None,
    ) -> PriceChangeQuote:
        """Quote a plan change without applying it."""
        subscription = self.get(organization_id)
        return quote_plan_change(
            subscription.plan,
            new_plan,
            usage,
            effective_date or self.lifecycle.clock(),
            catalog=self.lifecycle.catalog,
            tax_rate=self.config.tax.rate,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _write_cycle(self, transition: Callable[[], Subscription]) -> Subscription:
        retrying = Retrying(
            stop=stop_after_attempt(self.config.subscription.conflict_retry_attempts),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_exception_type(ConcurrentModificationError),
            before_sleep=_log_conflict,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                updated = transition()
                self.store.save(updated)
        return updated
