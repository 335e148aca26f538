"""Plan and product catalog."""

from carebase.platform.billing.catalog.models import (
    FeatureKey,
    PlanChangeType,
    PlanDefinition,
    PlanType,
    Product,
    ProductPricing,
)
from carebase.platform.billing.catalog.plans import (
    DEFAULT_PLAN_CATALOG,
    DEFAULT_PLAN_DEFINITIONS,
    PlanCatalog,
    compare_plans,
    resolve_plan_type,
)

__all__ = [
    "DEFAULT_PLAN_CATALOG",
    "DEFAULT_PLAN_DEFINITIONS",
    "FeatureKey",
    "PlanCatalog",
    "PlanChangeType",
    "PlanDefinition",
    "PlanType",
    "Product",
    "ProductPricing",
    "compare_plans",
    "resolve_plan_type",
]
