"""
Payments API Endpoints

Individual premium checkout, premium status and the Stripe webhook.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Header

from auth.jwt_auth import get_current_principal
from auth.models import AuthenticatedPrincipal
from billing.subscription_manager import SubscriptionManager
from billing.webhook_handler import StripeWebhookHandler
from core.exceptions import ServiceError, UpstreamFailureError
from .dependencies import get_subscription_manager, get_webhook_handler
from .schemas import CheckoutSessionResponse, PremiumStatusResponse, WebhookAckResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/create-checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    manager: SubscriptionManager = Depends(get_subscription_manager)
):
    """Start the one-time lifetime premium checkout"""
    try:
        session = manager.start_premium_checkout(principal)
    except ServiceError as e:
        raise UpstreamFailureError("Failed to create checkout session", e.reason or e.message)
    except Exception as e:
        logger.error(f"Checkout session error: {e}")
        raise UpstreamFailureError("Failed to create checkout session", str(e))

    return CheckoutSessionResponse(**session)


@router.post("/webhook", response_model=WebhookAckResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    handler: StripeWebhookHandler = Depends(get_webhook_handler)
):
    """
    Stripe webhook endpoint.

    The body must be read raw; signature verification fails on any
    re-serialized payload.
    """
    payload = await request.body()
    return await handler.handle_webhook(payload, stripe_signature)


@router.get("/premium-status", response_model=PremiumStatusResponse)
async def get_premium_status(principal: AuthenticatedPrincipal = Depends(get_current_principal)):
    return PremiumStatusResponse(status="active" if principal.is_premium else "inactive")
