"""
Subscription lifecycle state machine.

States: trial, active, suspended, cancelled.

    create_trial  ->  trial
    create_paid   ->  active
    change_plan   ->  active      from any state
    cancel        ->  cancelled   from trial, active, suspended
    suspend       ->  suspended   from active
    resume        ->  active      from suspended

``create_trial`` and ``create_paid`` start a fresh record and are refused
while the organization still holds a subscription that is not cancelled.

Transitions never mutate their input. Each returns a replacement record
with ``version`` bumped; the caller writes it back as a single atomic
replace and retries the whole transition on a write conflict.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from carebase.platform.billing.catalog.models import PlanType
from carebase.platform.billing.catalog.plans import DEFAULT_PLAN_CATALOG, PlanCatalog
from carebase.platform.billing.config import SubscriptionConfig
from carebase.platform.billing.exceptions import InvalidInputError, InvalidTransitionError
from carebase.platform.billing.subscriptions.models import (
    PlanSnapshot,
    Subscription,
    SubscriptionStatus,
    SubscriptionTransition,
)
from carebase.platform.logging import get_logger

logger = get_logger(__name__)

_ALL_STATES = frozenset(SubscriptionStatus)

ALLOWED_SOURCE_STATES: dict[SubscriptionTransition, frozenset[SubscriptionStatus]] = {
    SubscriptionTransition.CHANGE_PLAN: _ALL_STATES,
    SubscriptionTransition.CANCEL: frozenset(
        {SubscriptionStatus.TRIAL, SubscriptionStatus.ACTIVE, SubscriptionStatus.SUSPENDED}
    ),
    SubscriptionTransition.SUSPEND: frozenset({SubscriptionStatus.ACTIVE}),
    SubscriptionTransition.RESUME: frozenset({SubscriptionStatus.SUSPENDED}),
}

TARGET_STATES: dict[SubscriptionTransition, SubscriptionStatus] = {
    SubscriptionTransition.CREATE_TRIAL: SubscriptionStatus.TRIAL,
    SubscriptionTransition.CREATE_PAID: SubscriptionStatus.ACTIVE,
    SubscriptionTransition.CHANGE_PLAN: SubscriptionStatus.ACTIVE,
    SubscriptionTransition.CANCEL: SubscriptionStatus.CANCELLED,
    SubscriptionTransition.SUSPEND: SubscriptionStatus.SUSPENDED,
    SubscriptionTransition.RESUME: SubscriptionStatus.ACTIVE,
}


def available_transitions(status: SubscriptionStatus) -> frozenset[SubscriptionTransition]:
    """Transitions that may be applied to an existing subscription in ``status``."""
    return frozenset(
        transition for transition, sources in ALLOWED_SOURCE_STATES.items() if status in sources
    )


def utcnow() -> datetime:
    return datetime.now(UTC)


class SubscriptionLifecycle:
    """Applies lifecycle transitions to subscription records."""

    def __init__(
        self,
        catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
        config: SubscriptionConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.catalog = catalog
        self.config = config or SubscriptionConfig()
        self.clock = clock

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_trial(
        self,
        organization_id: str,
        created_by: str,
        trial_days: int | None = None,
        existing: Subscription | None = None,
    ) -> Subscription:
        """Start a trial on the configured trial plan."""
        self._ensure_fresh(existing, SubscriptionTransition.CREATE_TRIAL)
        days = self.config.default_trial_days if trial_days is None else trial_days
        if days < 0:
            raise InvalidInputError("trial_days must not be negative", "trial_days", days)

        now = self.clock()
        definition = self.catalog.get_definition(self.config.trial_plan)
        subscription = Subscription(
            id=str(uuid4()),
            organization_id=organization_id,
            status=SubscriptionStatus.TRIAL,
            trial_days=days,
            trial_start_date=now,
            trial_end_date=now + timedelta(days=days),
            start_date=now,
            plan_snapshot=PlanSnapshot.from_definition(definition),
            auto_renewal=False,
            created_at=now,
            updated_at=now,
            created_by=created_by,
            updated_by=created_by,
            version=self._next_version(existing),
        )
        self._log(SubscriptionTransition.CREATE_TRIAL, existing, subscription)
        return subscription

    def create_paid(
        self,
        organization_id: str,
        plan: PlanType | str,
        created_by: str,
        auto_renewal: bool = True,
        existing: Subscription | None = None,
    ) -> Subscription:
        """Start a paid subscription, billed every ``billing_cycle_days``."""
        self._ensure_fresh(existing, SubscriptionTransition.CREATE_PAID)

        now = self.clock()
        definition = self.catalog.get_definition(plan)
        subscription = Subscription(
            id=str(uuid4()),
            organization_id=organization_id,
            status=SubscriptionStatus.ACTIVE,
            trial_days=0,
            start_date=now,
            next_billing_date=self._next_billing_date(now),
            plan_snapshot=PlanSnapshot.from_definition(definition),
            auto_renewal=auto_renewal,
            created_at=now,
            updated_at=now,
            created_by=created_by,
            updated_by=created_by,
            version=self._next_version(existing),
        )
        self._log(SubscriptionTransition.CREATE_PAID, existing, subscription)
        return subscription

    # ------------------------------------------------------------------
    # Transitions on an existing record
    # ------------------------------------------------------------------

    def change_plan(
        self, subscription: Subscription, plan: PlanType | str, updated_by: str
    ) -> Subscription:
        """
        Move to ``plan`` and activate.

        Upgrade and downgrade are handled the same way: no proration is
        applied here.
        """
        self._ensure_allowed(subscription, SubscriptionTransition.CHANGE_PLAN)
        definition = self.catalog.get_definition(plan)
        now = self.clock()
        updated = self._apply(
            subscription,
            updated_by,
            now,
            status=SubscriptionStatus.ACTIVE,
            plan_snapshot=PlanSnapshot.from_definition(definition),
            next_billing_date=self._next_billing_date(now),
            trial_end_date=None,
            auto_renewal=True,
            cancelled_at=None,
            cancellation_reason=None,
        )
        self._log(SubscriptionTransition.CHANGE_PLAN, subscription, updated)
        return updated

    def cancel(self, subscription: Subscription, reason: str, updated_by: str) -> Subscription:
        """Cancel; a cancelled subscription cannot be cancelled again."""
        self._ensure_allowed(subscription, SubscriptionTransition.CANCEL)
        now = self.clock()
        updated = self._apply(
            subscription,
            updated_by,
            now,
            status=SubscriptionStatus.CANCELLED,
            auto_renewal=False,
            cancelled_at=now,
            cancellation_reason=reason,
        )
        self._log(SubscriptionTransition.CANCEL, subscription, updated, reason=reason)
        return updated

    def suspend(self, subscription: Subscription, updated_by: str) -> Subscription:
        """Suspend an active subscription. Billing fields are left untouched."""
        self._ensure_allowed(subscription, SubscriptionTransition.SUSPEND)
        updated = self._apply(
            subscription,
            updated_by,
            self.clock(),
            status=SubscriptionStatus.SUSPENDED,
            auto_renewal=False,
        )
        self._log(SubscriptionTransition.SUSPEND, subscription, updated)
        return updated

    def resume(self, subscription: Subscription, updated_by: str) -> Subscription:
        """Reactivate a suspended subscription with a fresh billing date."""
        self._ensure_allowed(subscription, SubscriptionTransition.RESUME)
        now = self.clock()
        updated = self._apply(
            subscription,
            updated_by,
            now,
            status=SubscriptionStatus.ACTIVE,
            auto_renewal=True,
            next_billing_date=self._next_billing_date(now),
        )
        self._log(SubscriptionTransition.RESUME, subscription, updated)
        return updated

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _next_billing_date(self, now: datetime) -> datetime:
        return now + timedelta(days=self.config.billing_cycle_days)

    @staticmethod
    def _next_version(existing: Subscription | None) -> int:
        return existing.version + 1 if existing is not None else 1

    @staticmethod
    def _ensure_fresh(existing: Subscription | None, transition: SubscriptionTransition) -> None:
        if existing is not None and existing.status != SubscriptionStatus.CANCELLED:
            raise InvalidTransitionError(
                existing.status.value, transition.value, TARGET_STATES[transition].value
            )

    @staticmethod
    def _ensure_allowed(subscription: Subscription, transition: SubscriptionTransition) -> None:
        if subscription.status not in ALLOWED_SOURCE_STATES[transition]:
            raise InvalidTransitionError(
                subscription.status.value, transition.value, TARGET_STATES[transition].value
            )

    @staticmethod
    def _apply(
        subscription: Subscription, updated_by: str, now: datetime, **changes: object
    ) -> Subscription:
        return subscription.replace(
            updated_at=now,
            updated_by=updated_by,
            version=subscription.version + 1,
            **changes,
        )

    @staticmethod
    def _log(
        transition: SubscriptionTransition,
        before: Subscription | None,
        after: Subscription,
        **extra: object,
    ) -> None:
        logger.info(
            f"subscription.{transition.value}",
            organization_id=after.organization_id,
            subscription_id=after.id,
            from_status=before.status.value if before is not None else None,
            to_status=after.status.value,
            plan=after.plan.value,
            version=after.version,
            **extra,
        )
