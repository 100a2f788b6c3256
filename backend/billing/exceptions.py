"""
Billing-specific exceptions
"""

from core.exceptions import ServiceError


class BillingException(ServiceError):
    """Base exception for billing operations"""

    status_code = 500

    def __init__(self, message: str, reason: str = None, code: str = None):
        super().__init__(message, reason, code=code or "BILLING_ERROR")


class InvalidBillingPlanException(BillingException):
    """Raised when an invalid billing plan is specified"""

    status_code = 400

    def __init__(self, plan_type: str = None):
        super().__init__("Invalid plan type", code="INVALID_BILLING_PLAN")
        self.plan_type = plan_type


class StripeException(BillingException):
    """Raised when Stripe API operations fail"""

    def __init__(self, message: str, stripe_error_code: str = None,
                 stripe_error_type: str = None):
        super().__init__("Payment provider request failed", reason=message, code="STRIPE_ERROR")
        self.stripe_error_code = stripe_error_code
        self.stripe_error_type = stripe_error_type


class WebhookVerificationException(BillingException):
    """Raised when webhook verification fails"""

    status_code = 400

    def __init__(self, message: str = "Webhook verification failed"):
        super().__init__(f"Webhook Error: {message}", code="WEBHOOK_VERIFICATION_FAILED")
