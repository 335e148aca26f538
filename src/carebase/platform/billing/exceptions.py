"""
Billing engine exceptions.

Custom exceptions for billing operations with clear error messages.
Every error carries a machine-readable code, a status code, context and a
recovery hint so the calling application can build its own messaging.
"""

from typing import Any


class BillingError(Exception):
    """
    Base billing system error with enhanced context.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for API responses
        status_code: HTTP status code for this error type
        context: Additional context data about the error
        recovery_hint: Suggested action to resolve the error
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 400,
        context: dict[str, Any] | None = None,
        recovery_hint: str | None = None,
    ):
        self.message = message
        self.error_code = error_code or "BILLING_ERROR"
        self.status_code = status_code
        self.context = context or {}
        self.recovery_hint = recovery_hint
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "context": self.context,
            "recovery_hint": self.recovery_hint,
        }


class PricingError(BillingError):
    """Pricing-related errors."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        recovery_hint: str | None = None,
    ):
        super().__init__(
            message, "PRICING_ERROR", status_code=400, context=context, recovery_hint=recovery_hint
        )


class InvalidInputError(PricingError):
    """Malformed input handed to a calculation function."""

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        context: dict[str, Any] = {}
        if field:
            context["field"] = field
            context["value"] = value

        super().__init__(
            message,
            context=context,
            recovery_hint="Validate counts, prices and rates before calling the billing engine",
        )
        self.error_code = "INVALID_INPUT"


class ProrationError(InvalidInputError):
    """Proration period that cannot be priced against a single month."""

    def __init__(self, message: str, start_date: Any, end_date: Any) -> None:
        super().__init__(message)
        self.context = {"start_date": str(start_date), "end_date": str(end_date)}
        self.recovery_hint = "Split the period at month boundaries and prorate each part"
        self.error_code = "INVALID_PRORATION_PERIOD"


class PriceCalculationError(PricingError):
    """A calculation produced a value that breaks a pricing invariant."""

    def __init__(self, message: str, field: str, value: int) -> None:
        super().__init__(
            message,
            context={"field": field, "value": value},
            recovery_hint="Check plan and product pricing configuration",
        )
        self.error_code = "PRICE_CALCULATION_ERROR"
        self.status_code = 500


class SubscriptionError(BillingError):
    """Subscription-related errors."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        recovery_hint: str | None = None,
    ):
        super().__init__(
            message,
            "SUBSCRIPTION_ERROR",
            status_code=400,
            context=context,
            recovery_hint=recovery_hint,
        )


class SubscriptionNotFoundError(SubscriptionError):
    """Subscription not found error."""

    def __init__(self, message: str, organization_id: str | None = None) -> None:
        context = {}
        if organization_id:
            context["organization_id"] = organization_id

        super().__init__(
            message,
            context=context,
            recovery_hint="Create a trial or paid subscription for the organization first",
        )
        self.error_code = "SUBSCRIPTION_NOT_FOUND"
        self.status_code = 404


class SubscriptionStateError(SubscriptionError):
    """Invalid subscription state transition error."""

    def __init__(self, message: str, current_state: str, requested_state: str) -> None:
        super().__init__(
            message,
            context={"current_state": current_state, "requested_state": requested_state},
            recovery_hint=f"Cannot transition from {current_state} to {requested_state}. Check subscription status first.",
        )
        self.error_code = "INVALID_SUBSCRIPTION_STATE"


class InvalidTransitionError(SubscriptionStateError):
    """A lifecycle transition was attempted from a state that does not allow it."""

    def __init__(self, current_state: str, transition: str, target_state: str) -> None:
        super().__init__(
            f"Cannot {transition} a subscription in state '{current_state}'",
            current_state=current_state,
            requested_state=target_state,
        )
        self.context["transition"] = transition
        self.transition = transition
        self.current_state = current_state
        self.error_code = "INVALID_TRANSITION"
        self.status_code = 409


class ConcurrentModificationError(SubscriptionError):
    """The store rejected a save because the record changed since it was read."""

    def __init__(self, organization_id: str, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Subscription for organization {organization_id} was modified concurrently",
            context={
                "organization_id": organization_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
            recovery_hint="Reload the subscription and retry the transition",
        )
        self.error_code = "CONCURRENT_MODIFICATION"
        self.status_code = 409


class PlanNotFoundError(SubscriptionError):
    """Subscription plan not found error."""

    def __init__(self, message: str, plan_id: str | None = None) -> None:
        context = {}
        if plan_id:
            context["plan_id"] = plan_id

        super().__init__(
            message,
            context=context,
            recovery_hint="Use one of the plan types defined in the plan catalog",
        )
        self.error_code = "PLAN_NOT_FOUND"
        self.status_code = 404


class BillingConfigurationError(BillingError):
    """Billing configuration errors."""

    def __init__(
        self, message: str, config_key: str | None = None, recovery_hint: str | None = None
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message,
            "BILLING_CONFIG_ERROR",
            status_code=500,
            context=context,
            recovery_hint=recovery_hint or "Check billing configuration settings",
        )
