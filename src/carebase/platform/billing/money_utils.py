"""
Money and currency utilities using py-moneyed and Babel.

Billing amounts are whole yen held as ``int``. These helpers turn them into
Money objects for locale-aware display and floor fractional intermediate
results back to whole currency units.
"""

from decimal import ROUND_FLOOR, Decimal
from functools import lru_cache
from typing import Any

from babel import Locale
from babel.core import UnknownLocaleError
from babel.numbers import format_currency
from moneyed import Currency, Money, get_currency
from moneyed.classes import CurrencyDoesNotExist

# Default locale for formatting
DEFAULT_LOCALE = "ja_JP"


def to_decimal(value: int | float | Decimal | str) -> Decimal:
    """Convert a number to Decimal without binary float residue."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def floor_amount(value: int | float | Decimal | str) -> int:
    """Floor an amount to whole currency units."""
    return int(to_decimal(value).to_integral_value(rounding=ROUND_FLOOR))


class MoneyHandler:
    """Central handler for money operations with proper error handling."""

    def __init__(self, default_currency: str = "JPY", default_locale: str = DEFAULT_LOCALE) -> None:
        self.default_currency = self._validate_currency(default_currency)
        self.default_locale = self._validate_locale(default_locale)

    def _validate_currency(self, currency_code: str) -> Currency:
        """Validate and return Currency object."""
        try:
            return get_currency(currency_code.upper())
        except CurrencyDoesNotExist:
            raise ValueError(f"Invalid currency code: {currency_code}")

    def _validate_locale(self, locale_code: str) -> str:
        """Validate locale code."""
        try:
            Locale.parse(locale_code)
            return locale_code
        except (UnknownLocaleError, ValueError):
            return DEFAULT_LOCALE

    def create_money(self, amount: int | Decimal | str, currency: str | None = None) -> Money:
        """Create Money object with proper validation."""
        currency = currency or self.default_currency.code
        validated_currency = self._validate_currency(currency)
        return Money(amount=to_decimal(amount), currency=validated_currency)

    def format_money(self, money: Money, locale: str | None = None, **kwargs: Any) -> str:
        """Format Money object with locale-aware formatting."""
        locale = locale or self.default_locale
        validated_locale = self._validate_locale(locale)

        try:
            return format_currency(
                number=money.amount, currency=money.currency.code, locale=validated_locale, **kwargs
            )
        except (TypeError, ValueError):
            # Fallback to simple formatting if locale issues
            return f"{money.currency.code} {money.amount}"

    def format_amount(self, amount: int, locale: str | None = None) -> str:
        """Format a whole-unit amount in the default currency."""
        return self.format_money(self.create_money(amount), locale)


def get_money_handler() -> MoneyHandler:
    """Handler for the configured billing currency and locale."""
    from carebase.platform.billing.config import get_billing_config

    currency = get_billing_config().currency
    return _handler_for(currency.currency, currency.locale)


@lru_cache(maxsize=8)
def _handler_for(currency: str, locale: str) -> MoneyHandler:
    return MoneyHandler(default_currency=currency, default_locale=locale)


def create_money(amount: int | Decimal | str, currency: str | None = None) -> Money:
    """Create Money object with the configured handler."""
    return get_money_handler().create_money(amount, currency)


def format_money(money: Money, locale: str | None = None, **kwargs: Any) -> str:
    """Format Money with the configured handler."""
    return get_money_handler().format_money(money, locale, **kwargs)


__all__ = [
    "MoneyHandler",
    "create_money",
    "floor_amount",
    "format_money",
    "get_money_handler",
    "to_decimal",
]
