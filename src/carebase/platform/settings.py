from __future__ import annotations

"""Centralized configuration using pydantic-settings.

All configuration is loaded from environment variables and .env files.
This is the single source of truth for platform configuration.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Main application settings.

    All settings can be overridden via environment variables.
    For nested settings, use double underscore: BILLING__DEFAULT_TRIAL_DAYS=30
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # ============================================================
    # Observability
    # ============================================================

    class ObservabilitySettings(BaseModel):
        """Observability configuration."""

        log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
        log_format: str = Field("json", description="Log format (json or text)")

    observability: ObservabilitySettings = ObservabilitySettings()  # type: ignore[call-arg]

    # ============================================================
    # Billing Configuration
    # ============================================================

    class BillingSettings(BaseModel):
        """Subscription and billing engine configuration."""

        # Currency (single currency, integer yen)
        currency: str = Field("JPY", description="Billing currency code")
        locale: str = Field("ja_JP", description="Locale used to format amounts")

        # Tax
        tax_rate: Decimal = Field(
            Decimal("0.10"), ge=0, le=1, description="Consumption tax rate (0.10 = 10%)"
        )

        # Subscription settings
        default_trial_days: int = Field(14, ge=0, description="Default trial period in days")
        trial_plan: str = Field("demo", description="Plan whose entitlements a trial receives")
        billing_cycle_days: int = Field(
            30, ge=1, description="Days between billing dates for paid subscriptions"
        )

        # Store interaction
        conflict_retry_attempts: int = Field(
            3, ge=1, description="Attempts for a transition when the store reports a write conflict"
        )

    billing: BillingSettings = BillingSettings()  # type: ignore[call-arg]


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get global settings instance (singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()  # type: ignore
    return _settings


def reset_settings() -> None:
    """Reset settings (mainly for testing)."""
    global _settings
    _settings = None


# Convenience export
settings = get_settings()
