"""
Stripe Webhook Handler

Verifies incoming Stripe events, classifies them, and applies the ones this
service acts on: enterprise subscription activation and individual premium
payments.
"""

import logging
from typing import Dict, Any, Optional
from enum import Enum

from .models import BillingEvent, IndividualPayment, OrganizationSubscription, Unhandled
from .stripe_client import StripeClient
from .subscription_manager import SubscriptionManager

logger = logging.getLogger(__name__)


class StripeEventType(str, Enum):
    """Stripe webhook event types we handle"""
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    SUBSCRIPTION_CREATED = "customer.subscription.created"


ORGANIZATION_EVENT_TYPES = {
    StripeEventType.CHECKOUT_SESSION_COMPLETED.value,
    StripeEventType.SUBSCRIPTION_CREATED.value,
}


def classify_event(event: Dict[str, Any]) -> BillingEvent:
    """
    Sort a verified event into exactly one billing case.

    Organization metadata wins over ``client_reference_id`` when a completed
    checkout carries both.
    """
    event_id = event.get("id", "")
    event_type = event.get("type", "")
    data = (event.get("data") or {}).get("object") or {}
    metadata = data.get("metadata") or {}

    organization_id = metadata.get("organizationId")
    if event_type in ORGANIZATION_EVENT_TYPES and organization_id:
        if event_type == StripeEventType.SUBSCRIPTION_CREATED.value:
            subscription_id = data.get("id")
        else:
            subscription_id = data.get("subscription")
        return OrganizationSubscription(
            event_id=event_id,
            event_type=event_type,
            organization_id=organization_id,
            plan_type=metadata.get("planType"),
            subscription_id=subscription_id,
        )

    client_reference_id = data.get("client_reference_id")
    if event_type == StripeEventType.CHECKOUT_SESSION_COMPLETED.value and client_reference_id:
        return IndividualPayment(event_id=event_id, user_id=client_reference_id)

    return Unhandled(event_id=event_id, event_type=event_type)


class StripeWebhookHandler:
    """
    Handles Stripe webhook events and updates local records accordingly.

    Once the signature is verified the handler always acknowledges the event;
    failures while applying it are logged, not reported back to Stripe.
    """

    def __init__(self, stripe_client: StripeClient, subscription_manager: SubscriptionManager):
        self.stripe_client = stripe_client
        self.subscription_manager = subscription_manager

    async def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Handle incoming Stripe webhook.

        Raises:
            WebhookVerificationException: Signature or payload invalid
        """
        event = self.stripe_client.verify_webhook_signature(payload, signature)
        billing_event = classify_event(event)

        try:
            await self._apply(billing_event)
        except Exception as e:
            logger.error(f"Webhook processing failed for {event.get('type')} ({event.get('id')}): {e}")
            self.subscription_manager.db.rollback()

        return {"received": True}

    async def _apply(self, billing_event: BillingEvent):
        if isinstance(billing_event, OrganizationSubscription):
            self.subscription_manager.activate_organization_subscription(
                organization_id=billing_event.organization_id,
                plan_type=billing_event.plan_type,
                subscription_id=billing_event.subscription_id,
            )
        elif isinstance(billing_event, IndividualPayment):
            await self.subscription_manager.mark_user_premium(billing_event.user_id)
        else:
            logger.info(f"Unhandled webhook event type: {billing_event.event_type}")
