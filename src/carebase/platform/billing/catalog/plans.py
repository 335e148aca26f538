"""
Plan catalog.

The catalog is an immutable mapping from plan type to definition, built once
at process start and passed explicitly to the calculators that need it.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from carebase.platform.billing.catalog.models import (
    FeatureKey,
    PlanChangeType,
    PlanDefinition,
    PlanType,
)
from carebase.platform.billing.exceptions import PlanNotFoundError

DEFAULT_PLAN_DEFINITIONS: tuple[PlanDefinition, ...] = (
    PlanDefinition(
        plan=PlanType.DEMO,
        display_name="Demo",
        description="Try every feature against demo data",
        monthly_price=0,
        device_price=0,
        max_staff_per_device=999,
        max_staff=10,
        max_clients=20,
        storage_limit=1024,
        features={
            FeatureKey.PRODUCTS.value: True,
            FeatureKey.AI_PRODUCTS.value: True,
            FeatureKey.COMMUNITY.value: False,
            FeatureKey.DATA_PERSISTENCE.value: False,
            FeatureKey.EXTERNAL_API.value: False,
            FeatureKey.AI_REPORTS.value: False,
        },
    ),
    PlanDefinition(
        plan=PlanType.FREE,
        display_name="Free",
        description="Representative account only, free of charge",
        monthly_price=0,
        device_price=0,
        max_staff_per_device=1,
        max_staff=1,
        max_clients=20,
        storage_limit=1024,
        features={
            FeatureKey.PRODUCTS.value: True,
            FeatureKey.AI_PRODUCTS.value: False,
            FeatureKey.COMMUNITY.value: True,
            FeatureKey.DATA_PERSISTENCE.value: True,
            FeatureKey.EXTERNAL_API.value: False,
            FeatureKey.AI_REPORTS.value: False,
        },
    ),
    PlanDefinition(
        plan=PlanType.STANDARD,
        display_name="Standard",
        description="Facility data and products, billed per device",
        monthly_price=0,
        device_price=1000,
        max_staff_per_device=3,
        max_staff=300,
        max_clients=1000,
        storage_limit=10240,
        features={
            FeatureKey.PRODUCTS.value: True,
            FeatureKey.AI_PRODUCTS.value: False,
            FeatureKey.COMMUNITY.value: True,
            FeatureKey.DATA_PERSISTENCE.value: True,
            FeatureKey.EXTERNAL_API.value: False,
            FeatureKey.AI_REPORTS.value: False,
        },
    ),
    PlanDefinition(
        plan=PlanType.AI,
        display_name="AI",
        description="Standard plus generative AI and external API features",
        monthly_price=0,
        device_price=1000,
        max_staff_per_device=3,
        max_staff=300,
        max_clients=1000,
        storage_limit=51200,
        features={
            FeatureKey.PRODUCTS.value: True,
            FeatureKey.AI_PRODUCTS.value: True,
            FeatureKey.COMMUNITY.value: True,
            FeatureKey.DATA_PERSISTENCE.value: True,
            FeatureKey.EXTERNAL_API.value: True,
            FeatureKey.AI_REPORTS.value: True,
        },
    ),
)


class PlanCatalog(Mapping[PlanType, PlanDefinition]):
    """Read-only lookup of plan definitions."""

    def __init__(self, definitions: tuple[PlanDefinition, ...] | list[PlanDefinition]) -> None:
        table = {definition.plan: definition for definition in definitions}
        missing = [plan.value for plan in PlanType if plan not in table]
        if missing:
            raise PlanNotFoundError(
                f"Plan catalog is missing definitions for: {', '.join(missing)}",
                plan_id=missing[0],
            )
        self._plans = MappingProxyType(table)

    def __getitem__(self, plan: PlanType | str) -> PlanDefinition:
        return self._plans[resolve_plan_type(plan)]

    def __iter__(self) -> Iterator[PlanType]:
        return iter(self._plans)

    def __len__(self) -> int:
        return len(self._plans)

    def __contains__(self, plan: object) -> bool:
        if not isinstance(plan, str):
            return False
        try:
            return resolve_plan_type(plan) in self._plans
        except PlanNotFoundError:
            return False

    def get_definition(self, plan: PlanType | str) -> PlanDefinition:
        """Look up a plan definition, failing fast on unknown plans."""
        return self[plan]


def resolve_plan_type(plan: PlanType | str) -> PlanType:
    """Convert a plan key to PlanType or raise PlanNotFoundError."""
    if isinstance(plan, PlanType):
        return plan
    try:
        return PlanType(plan)
    except ValueError:
        raise PlanNotFoundError(f"Unknown plan type: {plan!r}", plan_id=str(plan)) from None


def compare_plans(current_plan: PlanType | str, new_plan: PlanType | str) -> PlanChangeType:
    """Classify a plan change by entitlement rank."""
    current = resolve_plan_type(current_plan)
    new = resolve_plan_type(new_plan)
    if current == new:
        return PlanChangeType.SAME
    return PlanChangeType.UPGRADE if new.rank > current.rank else PlanChangeType.DOWNGRADE


DEFAULT_PLAN_CATALOG = PlanCatalog(DEFAULT_PLAN_DEFINITIONS)
