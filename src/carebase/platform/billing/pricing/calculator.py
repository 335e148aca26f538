"""
Monthly fee calculator.

Computes what a tenant owes for one month from its plan and usage snapshot:

1. device fee (zero on demo and free plans)
2. product and AI add-on fees, one detail line per product in input order
3. subtotal
4. percentage discount (floored) plus fixed discount, capped at the subtotal
5. tax on the discounted amount (floored)
6. total

Rounding happens only at the discount and tax steps. Changing that order
changes totals, so it is part of the pricing contract.
"""

from collections.abc import Collection, Iterable
from datetime import date, datetime
from decimal import Decimal

from carebase.platform.billing.catalog.models import PlanType, Product
from carebase.platform.billing.catalog.plans import (
    DEFAULT_PLAN_CATALOG,
    PlanCatalog,
    compare_plans,
    resolve_plan_type,
)
from carebase.platform.billing.config import DEFAULT_TAX_RATE
from carebase.platform.billing.exceptions import InvalidInputError, PriceCalculationError
from carebase.platform.billing.money_utils import floor_amount, to_decimal
from carebase.platform.billing.pricing.models import (
    BillingUsage,
    PriceChangeQuote,
    PricingCalculation,
    ProductFeeDetail,
)
from carebase.platform.billing.pricing.proration import calculate_proration, end_of_month
from carebase.platform.logging import get_logger

logger = get_logger(__name__)


def _require_non_negative(field: str, value: int | Decimal) -> None:
    if value < 0:
        raise InvalidInputError(f"{field} must not be negative", field=field, value=value)


def _check_result(calculation_fields: dict[str, int]) -> None:
    for field, value in calculation_fields.items():
        if value < 0:
            raise PriceCalculationError(f"Calculated {field} is negative", field=field, value=value)
    if calculation_fields["discount"] > calculation_fields["subtotal"]:
        raise PriceCalculationError(
            "Calculated discount exceeds subtotal",
            field="discount",
            value=calculation_fields["discount"],
        )


def calculate_monthly_fee(
    plan: PlanType | str,
    device_count: int,
    products: Iterable[Product],
    ai_enabled_product_ids: Collection[str] = (),
    representative_count: int = 1,
    discount_rate: int | Decimal | str = 0,
    discount_amount: int = 0,
    *,
    catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
    tax_rate: Decimal = DEFAULT_TAX_RATE,
) -> PricingCalculation:
    """
    Calculate the monthly fee for a plan and usage snapshot.

    Args:
        plan: Plan the tenant is on
        device_count: Billable devices, already net of any exclusions
        products: Resolved add-on products, in display order
        ai_enabled_product_ids: Products whose AI variant is switched on
        representative_count: Representatives on the account (informational)
        discount_rate: Percentage discount, 0-100
        discount_amount: Fixed discount in yen, added to the percentage discount
        catalog: Plan catalog to price against
        tax_rate: Consumption tax rate

    Returns:
        A new PricingCalculation

    Raises:
        InvalidInputError: Negative counts or discounts, or a rate above 100
        PlanNotFoundError: Unknown plan
        PriceCalculationError: The result breaks a non-negativity invariant
    """
    definition = catalog.get_definition(plan)
    rate = to_decimal(discount_rate)

    _require_non_negative("device_count", device_count)
    _require_non_negative("representative_count", representative_count)
    _require_non_negative("discount_rate", rate)
    _require_non_negative("discount_amount", discount_amount)
    if rate > 100:
        raise InvalidInputError(
            "discount_rate must not exceed 100", field="discount_rate", value=discount_rate
        )

    # Representatives are informational; device_count is already net of them
    representative_free = representative_count >= 1
    free_staff_count = 1 if representative_free else 0

    device_fee = device_count * definition.device_price if definition.bills_devices else 0

    ai_enabled = set(ai_enabled_product_ids)
    product_details: list[ProductFeeDetail] = []
    product_fees_total = 0
    ai_fees_total = 0
    for product in products:
        product_ai_enabled = product.id in ai_enabled
        base_price = product.pricing.standard
        ai_price = product.pricing.ai if product_ai_enabled and product.pricing.ai else 0
        line_subtotal = base_price + ai_price

        product_fees_total += line_subtotal
        ai_fees_total += ai_price
        product_details.append(
            ProductFeeDetail(
                product_id=product.id,
                product_name=product.display_name,
                base_price=base_price,
                ai_enabled=product_ai_enabled,
                ai_price=ai_price,
                subtotal=line_subtotal,
            )
        )

    subtotal = device_fee + product_fees_total

    discount = floor_amount(Decimal(subtotal) * rate / 100) + discount_amount
    discount = min(discount, subtotal)

    after_discount = subtotal - discount
    tax = floor_amount(Decimal(after_discount) * tax_rate)
    total = after_discount + tax

    _check_result(
        {
            "device_fee": device_fee,
            "product_fees_total": product_fees_total,
            "subtotal": subtotal,
            "discount": discount,
            "tax": tax,
            "total": total,
        }
    )

    logger.debug(
        "billing.fee_calculated",
        plan=definition.plan.value,
        device_count=device_count,
        product_count=len(product_details),
        subtotal=subtotal,
        discount=discount,
        total=total,
    )

    return PricingCalculation(
        device_fee=device_fee,
        product_details=tuple(product_details),
        product_fees_total=product_fees_total,
        ai_fees_total=ai_fees_total,
        subtotal=subtotal,
        discount=discount,
        tax_rate=tax_rate,
        tax=tax,
        total=total,
        representative_free=representative_free,
        free_staff_count=free_staff_count,
    )


def calculate_fee_for_usage(
    plan: PlanType | str,
    usage: BillingUsage,
    *,
    catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
    tax_rate: Decimal = DEFAULT_TAX_RATE,
) -> PricingCalculation:
    """Calculate the monthly fee from a BillingUsage snapshot."""
    return calculate_monthly_fee(
        plan,
        usage.device_count,
        usage.products,
        usage.ai_enabled_product_ids,
        usage.representative_count,
        usage.discount_rate,
        usage.discount_amount,
        catalog=catalog,
        tax_rate=tax_rate,
    )


def calculate_price_difference(current: PricingCalculation, new: PricingCalculation) -> int:
    """Return new total minus current total; positive means the bill goes up."""
    return new.total - current.total


def quote_plan_change(
    current_plan: PlanType | str,
    new_plan: PlanType | str,
    usage: BillingUsage,
    effective_date: date | datetime,
    *,
    new_usage: BillingUsage | None = None,
    catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
    tax_rate: Decimal = DEFAULT_TAX_RATE,
) -> PriceChangeQuote:
    """
    Price a plan change taking effect mid-month.

    The prorated difference covers the effective date through the last day
    of that month. A negative value is a credit.
    """
    current_type = resolve_plan_type(current_plan)
    new_type = resolve_plan_type(new_plan)

    current = calculate_fee_for_usage(current_type, usage, catalog=catalog, tax_rate=tax_rate)
    new = calculate_fee_for_usage(
        new_type, new_usage or usage, catalog=catalog, tax_rate=tax_rate
    )
    difference = calculate_price_difference(current, new)

    # Each side is floored independently
    month_end = end_of_month(effective_date)
    prorated_difference = calculate_proration(
        new.total, effective_date, month_end
    ) - calculate_proration(current.total, effective_date, month_end)

    return PriceChangeQuote(
        current_plan=current_type,
        new_plan=new_type,
        change_type=compare_plans(current_type, new_type),
        current=current,
        new=new,
        monthly_difference=difference,
        effective_date=effective_date,
        prorated_difference=prorated_difference,
    )
