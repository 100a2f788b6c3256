"""
Billing Module

Stripe checkout for enterprise plans and individual premium, and webhook
processing that applies completed payments.
"""

from .stripe_client import StripeClient
from .subscription_manager import SubscriptionManager
from .webhook_handler import StripeWebhookHandler, classify_event
from .models import (
    PlanType,
    EnterprisePlan,
    ENTERPRISE_PLANS,
    BillingEvent,
    IndividualPayment,
    OrganizationSubscription,
    Unhandled
)
from .exceptions import (
    BillingException,
    InvalidBillingPlanException,
    StripeException,
    WebhookVerificationException
)

__all__ = [
    "StripeClient",
    "SubscriptionManager",
    "StripeWebhookHandler",
    "classify_event",
    "PlanType",
    "EnterprisePlan",
    "ENTERPRISE_PLANS",
    "BillingEvent",
    "IndividualPayment",
    "OrganizationSubscription",
    "Unhandled",
    "BillingException",
    "InvalidBillingPlanException",
    "StripeException",
    "WebhookVerificationException"
]
