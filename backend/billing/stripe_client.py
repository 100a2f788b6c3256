"""
Stripe API client

Thin wrapper over the official SDK: customers, Checkout sessions and webhook
signature verification. One instance is built per request and injected into
the services that need it.
"""

import json
import logging
from typing import Dict, Any, Optional

import stripe

from .exceptions import StripeException, WebhookVerificationException
from .models import EnterprisePlan
from .stripe_config import StripeConfig, get_stripe_config


logger = logging.getLogger(__name__)


class StripeClient:
    """
    Stripe API client for customers, checkout and webhooks.

    The SDK client is created on first use so that webhook verification,
    which only needs the signing secret, works without an API key.
    """

    def __init__(self, config: StripeConfig = None):
        self.config = config or get_stripe_config()
        self.webhook_secret = self.config.webhook_secret
        self._sdk: Optional[stripe.StripeClient] = None

    @property
    def sdk(self) -> stripe.StripeClient:
        if self._sdk is None:
            if not self.config.secret_key:
                raise StripeException("Stripe secret key not configured")
            self._sdk = stripe.StripeClient(
                self.config.secret_key,
                stripe_version=self.config.api_version,
                max_network_retries=self.config.max_retries,
                http_client=stripe.RequestsClient(timeout=self.config.timeout),
            )
        return self._sdk

    def create_customer(
        self,
        email: str,
        name: str = None,
        metadata: Dict[str, str] = None
    ) -> str:
        """
        Create a new Stripe customer

        Returns:
            Stripe customer ID

        Raises:
            StripeException: If customer creation fails
        """
        params = {
            "email": email,
            "metadata": metadata or {}
        }
        if name:
            params["name"] = name

        try:
            customer = self.sdk.customers.create(params=params)
        except stripe.StripeError as e:
            logger.error(f"Failed to create Stripe customer: {e}")
            raise StripeException(
                message=str(e),
                stripe_error_code=e.code,
                stripe_error_type=e.error.type if e.error else None
            )

        logger.info(f"Created Stripe customer: {customer.id}")
        return customer.id

    def create_subscription_checkout(
        self,
        customer_id: Optional[str],
        plan: EnterprisePlan,
        metadata: Dict[str, str]
    ) -> Dict[str, Any]:
        """
        Create a subscription-mode Checkout session for an enterprise plan.

        Returns:
            {"id": session id, "url": hosted checkout URL}
        """
        params = {
            "payment_method_types": ["card"],
            "mode": "subscription",
            "success_url": self.config.enterprise_success_url,
            "cancel_url": self.config.enterprise_cancel_url,
            "line_items": [{"price": plan.stripe_price_id, "quantity": 1}],
            "metadata": metadata,
        }
        if customer_id:
            params["customer"] = customer_id

        return self._create_checkout_session(params)

    def create_premium_checkout(self, customer_email: str, user_id: str) -> Dict[str, Any]:
        """
        Create a one-time payment Checkout session for individual premium.

        Returns:
            {"id": session id, "url": hosted checkout URL}
        """
        params = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": self.config.default_currency,
                        "product_data": {"name": self.config.premium_product_name},
                        "unit_amount": self.config.premium_unit_amount,
                    },
                    "quantity": 1,
                }
            ],
            "customer_email": customer_email,
            "client_reference_id": user_id,
            "success_url": self.config.premium_success_url,
            "cancel_url": self.config.premium_cancel_url,
        }
        return self._create_checkout_session(params)

    def _create_checkout_session(self, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            session = self.sdk.checkout.sessions.create(params=params)
        except stripe.StripeError as e:
            logger.error(f"Failed to create checkout session: {e}")
            raise StripeException(
                message=str(e),
                stripe_error_code=e.code,
                stripe_error_type=e.error.type if e.error else None
            )

        logger.info(f"Created Stripe checkout session: {session.id} ({params['mode']})")
        return {"id": session.id, "url": session.url}

    def verify_webhook_signature(
        self,
        payload: bytes,
        signature: Optional[str]
    ) -> Dict[str, Any]:
        """
        Verify Stripe webhook signature and parse event

        Args:
            payload: Raw request body, exactly as received
            signature: Stripe-Signature header

        Returns:
            Parsed webhook event as plain dicts

        Raises:
            WebhookVerificationException: If verification fails
        """
        if not self.webhook_secret:
            raise WebhookVerificationException("Webhook secret not configured")
        if not signature:
            raise WebhookVerificationException("Missing Stripe-Signature header")

        if isinstance(payload, bytes):
            try:
                payload = payload.decode("utf-8")
            except UnicodeDecodeError:
                raise WebhookVerificationException("Invalid payload")

        try:
            stripe.WebhookSignature.verify_header(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.error(f"Invalid webhook signature: {e}")
            raise WebhookVerificationException("Invalid signature")

        try:
            event = json.loads(payload)
        except ValueError as e:
            logger.error(f"Invalid webhook payload: {e}")
            raise WebhookVerificationException("Invalid payload")

        if not isinstance(event, dict) or "type" not in event:
            raise WebhookVerificationException("Invalid payload")

        logger.info(f"Verified webhook event: {event['type']}")
        return event
