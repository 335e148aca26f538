"""
Billing module configuration
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from carebase.platform.billing.catalog.models import PlanType
from carebase.platform.billing.exceptions import BillingConfigurationError

DEFAULT_TAX_RATE = Decimal("0.10")


class TaxConfig(BaseModel):
    """Tax configuration"""

    model_config = ConfigDict(frozen=True)

    rate: Decimal = Field(DEFAULT_TAX_RATE, ge=0, le=1, description="Consumption tax rate")


class CurrencyConfig(BaseModel):
    """Currency configuration - single currency, whole yen"""

    model_config = ConfigDict(frozen=True)

    currency: str = Field("JPY", description="Currency code")
    locale: str = Field("ja_JP", description="Locale for formatted amounts")


class SubscriptionConfig(BaseModel):
    """Subscription lifecycle configuration"""

    model_config = ConfigDict(frozen=True)

    default_trial_days: int = Field(14, ge=0, description="Default trial period in days")
    trial_plan: PlanType = Field(PlanType.DEMO, description="Plan granted during a trial")
    billing_cycle_days: int = Field(30, ge=1, description="Days between paid billing dates")
    conflict_retry_attempts: int = Field(3, ge=1, description="Retries on store write conflicts")


class BillingConfig(BaseModel):
    """Main billing configuration"""

    model_config = ConfigDict(frozen=True)

    tax: TaxConfig = Field(default_factory=TaxConfig)
    currency: CurrencyConfig = Field(default_factory=CurrencyConfig)
    subscription: SubscriptionConfig = Field(default_factory=SubscriptionConfig)

    @classmethod
    def from_env(cls) -> "BillingConfig":
        """Create configuration from platform settings"""
        from carebase.platform.settings import get_settings

        billing = get_settings().billing

        try:
            trial_plan = PlanType(billing.trial_plan.lower())
        except ValueError:
            raise BillingConfigurationError(
                f"Unknown trial plan: {billing.trial_plan!r}",
                config_key="BILLING__TRIAL_PLAN",
                recovery_hint=f"Use one of: {', '.join(p.value for p in PlanType)}",
            ) from None

        return cls(
            tax=TaxConfig(rate=billing.tax_rate),
            currency=CurrencyConfig(currency=billing.currency, locale=billing.locale),
            subscription=SubscriptionConfig(
                default_trial_days=billing.default_trial_days,
                trial_plan=trial_plan,
                billing_cycle_days=billing.billing_cycle_days,
                conflict_retry_attempts=billing.conflict_retry_attempts,
            ),
        )


# Global configuration instance
_billing_config: BillingConfig | None = None


def get_billing_config() -> BillingConfig:
    """Get the global billing configuration instance"""
    global _billing_config
    if _billing_config is None:
        _billing_config = BillingConfig.from_env()
    return _billing_config


def set_billing_config(config: BillingConfig | None) -> None:
    """Set the global billing configuration instance (None resets it)"""
    global _billing_config
    _billing_config = config
