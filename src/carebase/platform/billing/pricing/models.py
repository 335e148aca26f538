"""
Pricing value objects.

Every amount is whole yen. Calculation results are frozen and rebuilt from
scratch on each run.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from moneyed import Money
from pydantic import BaseModel, ConfigDict, Field

from carebase.platform.billing.catalog.models import PlanChangeType, PlanType, Product
from carebase.platform.billing.money_utils import create_money


class ProductFeeDetail(BaseModel):
    """Per-product line of a fee calculation."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    base_price: int = Field(ge=0)
    ai_enabled: bool
    ai_price: int = Field(ge=0)
    subtotal: int = Field(ge=0)


class PricingCalculation(BaseModel):
    """Result of one monthly fee calculation."""

    model_config = ConfigDict(frozen=True)

    device_fee: int = Field(ge=0, description="Device count times device unit price")
    product_details: tuple[ProductFeeDetail, ...] = Field(
        default=(), description="Per-product breakdown in input order"
    )
    product_fees_total: int = Field(ge=0, description="Sum of product subtotals")
    ai_fees_total: int = Field(ge=0, description="Sum of AI add-on prices")
    subtotal: int = Field(ge=0, description="Pre-discount, pre-tax amount")
    discount: int = Field(ge=0, description="Percentage plus fixed discount, capped at subtotal")
    tax_rate: Decimal = Field(ge=0, le=1)
    tax: int = Field(ge=0)
    total: int = Field(ge=0, description="Tax-inclusive amount")
    representative_free: bool
    free_staff_count: int = Field(ge=0)

    @property
    def after_discount(self) -> int:
        return self.subtotal - self.discount

    @property
    def total_money(self) -> Money:
        return create_money(self.total)


class BillingUsage(BaseModel):
    """Usage snapshot a monthly fee is calculated from."""

    model_config = ConfigDict(frozen=True)

    device_count: int = Field(0, ge=0)
    products: tuple[Product, ...] = ()
    ai_enabled_product_ids: frozenset[str] = frozenset()
    representative_count: int = Field(1, ge=0)
    discount_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    discount_amount: int = Field(0, ge=0)


class PriceChangeQuote(BaseModel):
    """Monthly and prorated cost of moving a tenant to another plan."""

    model_config = ConfigDict(frozen=True)

    current_plan: PlanType
    new_plan: PlanType
    change_type: PlanChangeType
    current: PricingCalculation
    new: PricingCalculation
    monthly_difference: int = Field(description="Positive when the bill increases")
    effective_date: date | datetime
    prorated_difference: int = Field(
        description="Difference for the effective date through month end"
    )


class BreakdownLineKind(str, Enum):
    """Kinds of pricing breakdown lines."""

    DEVICE_FEE = "device_fee"
    PRODUCT = "product"
    SUBTOTAL = "subtotal"
    DISCOUNT = "discount"
    TAX = "tax"
    TOTAL = "total"
    REPRESENTATIVE_NOTE = "representative_note"


class BreakdownLine(BaseModel):
    """One line of a human-readable pricing breakdown."""

    model_config = ConfigDict(frozen=True)

    kind: BreakdownLineKind
    label: str
    amount: int | None = None
    base_price: int | None = None
    ai_price: int | None = None
