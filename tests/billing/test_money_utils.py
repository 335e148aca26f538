"""
Tests for money utilities.
"""

from decimal import Decimal

import pytest
from moneyed import Money

from carebase.platform.billing.config import BillingConfig, CurrencyConfig, set_billing_config
from carebase.platform.billing.money_utils import (
    MoneyHandler,
    create_money,
    floor_amount,
    format_money,
    get_money_handler,
    to_decimal,
)


@pytest.mark.unit
class TestDecimalHelpers:
    """Test Decimal conversion and flooring."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.1, Decimal("0.1")), ("12.5", Decimal("12.5")), (7, Decimal("7"))],
    )
    def test_to_decimal(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(Decimal("187.5"), 187), (Decimal("131.3"), 131), (Decimal("495"), 495), ("0.99", 0)],
    )
    def test_floor_amount(self, value, expected):
        assert floor_amount(value) == expected

    def test_floor_amount_rounds_toward_negative_infinity(self):
        assert floor_amount(Decimal("-0.5")) == -1


@pytest.mark.unit
class TestMoneyHandler:
    """Test MoneyHandler creation and formatting."""

    def test_create_money_defaults_to_yen(self):
        money = create_money(5445)

        assert isinstance(money, Money)
        assert money.amount == Decimal("5445")
        assert money.currency.code == "JPY"

    def test_invalid_currency(self):
        with pytest.raises(ValueError, match="Invalid currency code"):
            MoneyHandler(default_currency="XXZ")

    def test_invalid_locale_falls_back(self):
        handler = MoneyHandler(default_locale="not_a_locale")

        assert handler.default_locale == "ja_JP"

    def test_format_money_en_us(self):
        assert format_money(create_money(3000), locale="en_US") == "¥3,000"

    def test_format_amount_uses_default_locale(self):
        assert "5,445" in get_money_handler().format_amount(5445)


@pytest.mark.unit
class TestConfiguredMoneyHandler:
    """Test that the billing currency settings drive money handling."""

    def test_defaults_from_config(self):
        handler = get_money_handler()

        assert handler.default_currency.code == "JPY"
        assert handler.default_locale == "ja_JP"

    def test_locale_from_environment(self, monkeypatch):
        monkeypatch.setenv("BILLING__LOCALE", "en_US")

        assert get_money_handler().default_locale == "en_US"
        assert format_money(create_money(3000)) == "¥3,000"

    def test_currency_from_config(self):
        set_billing_config(BillingConfig(currency=CurrencyConfig(currency="USD", locale="en_US")))

        money = create_money(12)

        assert money.currency.code == "USD"
        assert format_money(money) == "$12.00"
