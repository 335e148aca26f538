"""
Subscription models.

A Subscription is the mutable root entity of the billing engine, but each
instance is frozen: transitions build a replacement record that the store
persists as one unit.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from carebase.platform.billing.catalog.models import PlanDefinition, PlanType


class SubscriptionStatus(str, Enum):
    """Subscription lifecycle states."""

    TRIAL = "trial"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class SubscriptionTransition(str, Enum):
    """Named lifecycle transitions."""

    CREATE_TRIAL = "create_trial"
    CREATE_PAID = "create_paid"
    CHANGE_PLAN = "change_plan"
    CANCEL = "cancel"
    SUSPEND = "suspend"
    RESUME = "resume"


class PlanSnapshot(BaseModel):
    """
    Plan-derived fields copied onto a subscription.

    The snapshot is replaced as a whole whenever the plan changes, so a
    subscription can never carry one plan's limits with another plan's
    features. Later catalog edits do not reach existing subscriptions.
    """

    model_config = ConfigDict(frozen=True)

    plan: PlanType
    monthly_price: int = Field(ge=0)
    max_staff: int = Field(ge=0)
    max_clients: int = Field(ge=0)
    storage_limit: int = Field(ge=0, description="Storage limit in megabytes")
    features: dict[str, bool] = Field(default_factory=dict)

    @classmethod
    def from_definition(cls, definition: PlanDefinition) -> "PlanSnapshot":
        return cls(
            plan=definition.plan,
            monthly_price=definition.monthly_price,
            max_staff=definition.max_staff,
            max_clients=definition.max_clients,
            storage_limit=definition.storage_limit,
            features=dict(definition.features),
        )


class Subscription(BaseModel):
    """Subscription record for one organization."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    # Identity
    id: str = Field(min_length=1)
    organization_id: str = Field(min_length=1, description="Owning tenant")

    # Lifecycle
    status: SubscriptionStatus
    trial_days: int = Field(0, ge=0)
    trial_start_date: datetime | None = None
    trial_end_date: datetime | None = None
    start_date: datetime
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    # Billing
    plan_snapshot: PlanSnapshot
    auto_renewal: bool = False
    next_billing_date: datetime | None = None

    # Audit
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str

    # Optimistic concurrency token, bumped on every transition
    version: int = Field(1, ge=1)

    @field_validator(
        "trial_start_date",
        "trial_end_date",
        "start_date",
        "cancelled_at",
        "next_billing_date",
        "created_at",
        "updated_at",
    )
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        """Naive timestamps from the store are UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _check_lifecycle_invariants(self) -> "Subscription":
        if self.status == SubscriptionStatus.TRIAL and self.trial_end_date is None:
            raise ValueError("trial subscriptions require trial_end_date")
        if self.status == SubscriptionStatus.CANCELLED:
            if self.auto_renewal:
                raise ValueError("cancelled subscriptions cannot auto-renew")
            if self.cancelled_at is None:
                raise ValueError("cancelled subscriptions require cancelled_at")
        elif self.cancelled_at is not None:
            raise ValueError("cancelled_at is only set on cancelled subscriptions")
        return self

    @property
    def plan(self) -> PlanType:
        return self.plan_snapshot.plan

    @property
    def monthly_price(self) -> int:
        return self.plan_snapshot.monthly_price

    @property
    def max_staff(self) -> int:
        return self.plan_snapshot.max_staff

    @property
    def max_clients(self) -> int:
        return self.plan_snapshot.max_clients

    @property
    def storage_limit(self) -> int:
        return self.plan_snapshot.storage_limit

    @property
    def features(self) -> dict[str, bool]:
        return self.plan_snapshot.features

    def replace(self, **changes: Any) -> "Subscription":
        """Return a validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return Subscription.model_validate(data)


class LimitCheck(BaseModel):
    """Capacity flags returned by the entitlement gate."""

    model_config = ConfigDict(frozen=True)

    can_add_staff: bool
    can_add_client: bool
    storage_available: bool
