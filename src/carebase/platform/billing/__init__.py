"""
Subscription and billing calculation engine.

Provides:
- Plan catalog lookup
- Monthly fee calculation (device fees, add-ons, discounts, tax)
- Proration and billing date arithmetic
- Subscription lifecycle state machine
- Entitlement checks for feature-gated actions

Storage, presentation and payment collection are handled by the calling
application.
"""

from carebase.platform.billing.exceptions import (
    BillingConfigurationError,
    BillingError,
    ConcurrentModificationError,
    InvalidInputError,
    InvalidTransitionError,
    PlanNotFoundError,
    PriceCalculationError,
    PricingError,
    ProrationError,
    SubscriptionError,
    SubscriptionNotFoundError,
    SubscriptionStateError,
)

__all__ = [
    "BillingConfigurationError",
    "BillingError",
    "ConcurrentModificationError",
    "InvalidInputError",
    "InvalidTransitionError",
    "PlanNotFoundError",
    "PriceCalculationError",
    "PricingError",
    "ProrationError",
    "SubscriptionError",
    "SubscriptionNotFoundError",
    "SubscriptionStateError",
]
