"""Readable pricing breakdowns built from a PricingCalculation."""

from carebase.platform.billing.money_utils import MoneyHandler, get_money_handler
from carebase.platform.billing.pricing.models import (
    BreakdownLine,
    BreakdownLineKind,
    PricingCalculation,
)


def build_pricing_breakdown(calculation: PricingCalculation) -> list[BreakdownLine]:
    """Ordered breakdown lines; zero device fees and zero discounts are omitted."""
    lines: list[BreakdownLine] = []

    if calculation.device_fee > 0:
        lines.append(
            BreakdownLine(
                kind=BreakdownLineKind.DEVICE_FEE, label="Device fee", amount=calculation.device_fee
            )
        )

    for detail in calculation.product_details:
        lines.append(
            BreakdownLine(
                kind=BreakdownLineKind.PRODUCT,
                label=detail.product_name,
                amount=detail.subtotal,
                base_price=detail.base_price,
                ai_price=detail.ai_price if detail.ai_enabled and detail.ai_price > 0 else None,
            )
        )

    lines.append(
        BreakdownLine(kind=BreakdownLineKind.SUBTOTAL, label="Subtotal", amount=calculation.subtotal)
    )

    if calculation.discount > 0:
        lines.append(
            BreakdownLine(
                kind=BreakdownLineKind.DISCOUNT, label="Discount", amount=-calculation.discount
            )
        )

    tax_percent = int(calculation.tax_rate * 100)
    lines.append(
        BreakdownLine(
            kind=BreakdownLineKind.TAX, label=f"Tax ({tax_percent}%)", amount=calculation.tax
        )
    )
    lines.append(BreakdownLine(kind=BreakdownLineKind.TOTAL, label="Total", amount=calculation.total))

    if calculation.representative_free:
        lines.append(
            BreakdownLine(
                kind=BreakdownLineKind.REPRESENTATIVE_NOTE,
                label=f"{calculation.free_staff_count} representative(s) free of charge",
            )
        )

    return lines


def format_pricing_breakdown(
    calculation: PricingCalculation,
    locale: str | None = None,
    handler: MoneyHandler | None = None,
) -> list[str]:
    """
    Render breakdown lines as text with locale-aware currency amounts.

    Uses the configured billing currency and locale unless a handler or
    locale is given.
    """
    handler = handler or get_money_handler()
    rendered: list[str] = []
    for line in build_pricing_breakdown(calculation):
        if line.amount is None:
            rendered.append(line.label)
        elif line.ai_price is not None and line.base_price is not None:
            rendered.append(
                f"{line.label}: {handler.format_amount(line.base_price, locale)}"
                f" + AI {handler.format_amount(line.ai_price, locale)}"
                f" = {handler.format_amount(line.amount, locale)}"
            )
        else:
            rendered.append(f"{line.label}: {handler.format_amount(line.amount, locale)}")
    return rendered
