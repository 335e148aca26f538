"""Fee calculation, proration, and billing date arithmetic."""

from carebase.platform.billing.pricing.breakdown import (
    build_pricing_breakdown,
    format_pricing_breakdown,
)
from carebase.platform.billing.pricing.calculator import (
    calculate_fee_for_usage,
    calculate_monthly_fee,
    calculate_price_difference,
    quote_plan_change,
)
from carebase.platform.billing.pricing.models import (
    BillingUsage,
    BreakdownLine,
    BreakdownLineKind,
    PriceChangeQuote,
    PricingCalculation,
    ProductFeeDetail,
)
from carebase.platform.billing.pricing.proration import (
    calculate_next_billing_date,
    calculate_proration,
    calculate_required_devices,
    days_in_month,
    end_of_month,
)

__all__ = [
    "BillingUsage",
    "BreakdownLine",
    "BreakdownLineKind",
    "PriceChangeQuote",
    "PricingCalculation",
    "ProductFeeDetail",
    "build_pricing_breakdown",
    "calculate_fee_for_usage",
    "calculate_monthly_fee",
    "calculate_next_billing_date",
    "calculate_price_difference",
    "calculate_proration",
    "calculate_required_devices",
    "days_in_month",
    "end_of_month",
    "format_pricing_breakdown",
    "quote_plan_change",
]
