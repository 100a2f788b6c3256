"""
Stripe Configuration Management

Configuration for Stripe API keys, webhooks and the redirect URLs handed to
Checkout, loaded from environment variables.
"""

import os
import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

logger = logging.getLogger(__name__)


class StripeEnvironment(str, Enum):
    """Stripe environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class StripeConfig:
    """Stripe configuration settings"""
    environment: StripeEnvironment
    secret_key: str
    webhook_secret: str
    client_url: str

    # API settings
    api_version: str = "2025-03-31.basil"
    max_retries: int = 3
    timeout: int = 30

    # Individual premium checkout
    premium_product_name: str = "Lifetime Subscription"
    premium_unit_amount: int = 1000
    default_currency: str = "usd"

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.is_production:
            if self.secret_key and not self.secret_key.startswith(("sk_live_", "rk_live_")):
                raise ValueError("Production environment requires live secret key")
        elif self.secret_key and self.secret_key.startswith("sk_live_"):
            logger.warning("Non-production environment is configured with a live secret key")

        if self.webhook_secret and not self.webhook_secret.startswith("whsec_"):
            raise ValueError("Invalid webhook secret format")

        self.client_url = self.client_url.rstrip("/")

    @property
    def is_production(self) -> bool:
        """Check if this is a production configuration"""
        return self.environment == StripeEnvironment.PRODUCTION

    @property
    def enterprise_success_url(self) -> str:
        return f"{self.client_url}/enterprise-success?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def enterprise_cancel_url(self) -> str:
        return f"{self.client_url}/enterprise-cancel"

    @property
    def premium_success_url(self) -> str:
        return f"{self.client_url}/payment-success"

    @property
    def premium_cancel_url(self) -> str:
        return f"{self.client_url}/payment-cancel"


def _detect_environment() -> StripeEnvironment:
    env = os.getenv("APP_ENVIRONMENT", "development").lower()

    if env == "production":
        return StripeEnvironment.PRODUCTION
    elif env == "staging":
        return StripeEnvironment.STAGING
    return StripeEnvironment.DEVELOPMENT


def load_stripe_config() -> StripeConfig:
    """Load configuration from environment variables"""
    environment = _detect_environment()
    secret_key = os.getenv("STRIPE_SECRET_KEY", "")
    if not secret_key:
        logger.warning("STRIPE_SECRET_KEY is not set; Stripe calls will fail")

    config = StripeConfig(
        environment=environment,
        secret_key=secret_key,
        webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET", ""),
        client_url=os.getenv("CLIENT_URL", "http://localhost:3000"),
        api_version=os.getenv("STRIPE_API_VERSION", "2025-03-31.basil"),
        max_retries=int(os.getenv("STRIPE_MAX_RETRIES", "3")),
        timeout=int(os.getenv("STRIPE_TIMEOUT", "30")),
    )

    logger.info(f"Loaded Stripe configuration for {environment.value} environment")
    return config


@lru_cache(maxsize=1)
def get_stripe_config() -> StripeConfig:
    """Get current Stripe configuration"""
    return load_stripe_config()
