"""
Plan and product catalog models.

Plans define the entitlement limits and unit prices a subscription receives.
Products are add-on modules priced independently of the plan.
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlanType(str, Enum):
    """Plan types, declared in entitlement rank order."""

    DEMO = "demo"
    FREE = "free"
    STANDARD = "standard"
    AI = "ai"

    @property
    def rank(self) -> int:
        """Entitlement rank; only used to classify plan changes."""
        return list(PlanType).index(self)


class PlanChangeType(str, Enum):
    """Direction of a plan change."""

    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"
    SAME = "same"


class FeatureKey(str, Enum):
    """Capability flags attached to a plan."""

    PRODUCTS = "products"
    AI_PRODUCTS = "ai_products"
    COMMUNITY = "community"
    DATA_PERSISTENCE = "data_persistence"
    EXTERNAL_API = "external_api"
    AI_REPORTS = "ai_reports"


class PlanDefinition(BaseModel):
    """Static definition of one plan. Prices are integer yen per month."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    plan: PlanType = Field(description="Plan type this definition describes")
    display_name: str = Field(description="Name shown to tenants")
    description: str = Field("", description="Short plan description")

    monthly_price: int = Field(0, ge=0, description="Device-independent monthly base price")
    device_price: int = Field(0, ge=0, description="Monthly price per device")
    max_staff_per_device: int = Field(ge=1, description="Staff members sharing one device")

    max_staff: int = Field(ge=0, description="Maximum registered staff")
    max_clients: int = Field(ge=0, description="Maximum registered clients")
    storage_limit: int = Field(ge=0, description="Storage limit in megabytes")

    features: Mapping[str, bool] = Field(
        default_factory=dict, description="Capability flags keyed by FeatureKey value"
    )

    @field_validator("features")
    @classmethod
    def _freeze_features(cls, value: Mapping[str, bool]) -> Mapping[str, bool]:
        return MappingProxyType(dict(value))

    @property
    def bills_devices(self) -> bool:
        """Demo and free plans never charge for devices."""
        return self.plan not in (PlanType.DEMO, PlanType.FREE)


class ProductPricing(BaseModel):
    """Monthly prices of an add-on product."""

    model_config = ConfigDict(frozen=True)

    standard: int = Field(ge=0, description="Base monthly price")
    ai: int | None = Field(None, ge=0, description="Extra monthly price when the AI variant is on")


class Product(BaseModel):
    """Add-on module a tenant can attach to its subscription."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(min_length=1, description="Product identifier")
    display_name: str = Field(description="Name shown on breakdowns")
    pricing: ProductPricing
