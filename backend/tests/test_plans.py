"""
Tests for the plan catalogue, Stripe configuration and record validation
"""

import pytest

from billing.exceptions import InvalidBillingPlanException
from billing.models import (
    ENTERPRISE_PLANS,
    BASE_FEATURES,
    PROFESSIONAL_FEATURES,
    ENTERPRISE_FEATURES,
    PlanType,
    get_plan,
    features_for_plan
)
from billing.stripe_config import StripeConfig, StripeEnvironment
from models.contract import Contract


class TestPlanCatalogue:

    @pytest.mark.parametrize("plan_type,price_id,max_users", [
        ("basic", "price_enterprise_basic_monthly", 10),
        ("professional", "price_enterprise_pro_monthly", 25),
        ("enterprise", "price_enterprise_unlimited_monthly", 100),
    ])
    def test_price_and_seats(self, plan_type, price_id, max_users):
        plan = get_plan(plan_type)
        assert plan.stripe_price_id == price_id
        assert plan.max_users == max_users

    def test_feature_sets_are_nested(self):
        assert set(BASE_FEATURES) < set(PROFESSIONAL_FEATURES) < set(ENTERPRISE_FEATURES)
        assert len(ENTERPRISE_FEATURES) == 10

    def test_custom_templates_above_basic(self):
        assert not ENTERPRISE_PLANS[PlanType.BASIC].allows_custom_templates
        assert ENTERPRISE_PLANS[PlanType.PROFESSIONAL].allows_custom_templates
        assert ENTERPRISE_PLANS[PlanType.ENTERPRISE].allows_custom_templates

    @pytest.mark.parametrize("plan_type", ["platinum", "", None, "Basic"])
    def test_unknown_plan(self, plan_type):
        with pytest.raises(InvalidBillingPlanException):
            get_plan(plan_type)

    def test_features_fall_back_to_basic(self):
        assert features_for_plan("platinum") == BASE_FEATURES
        features = features_for_plan("enterprise")
        features.append("mutated")
        assert "mutated" not in ENTERPRISE_PLANS[PlanType.ENTERPRISE].features


class TestStripeConfig:

    def config(self, **fields):
        params = {
            "environment": StripeEnvironment.DEVELOPMENT,
            "secret_key": "sk_test_123",
            "webhook_secret": "whsec_123",
            "client_url": "https://app.example.com/",
        }
        params.update(fields)
        return StripeConfig(**params)

    def test_redirect_urls(self):
        config = self.config()
        assert config.enterprise_success_url == (
            "https://app.example.com/enterprise-success?session_id={CHECKOUT_SESSION_ID}"
        )
        assert config.enterprise_cancel_url == "https://app.example.com/enterprise-cancel"

    def test_rejects_malformed_webhook_secret(self):
        with pytest.raises(ValueError):
            self.config(webhook_secret="secret")

    def test_production_requires_live_key(self):
        with pytest.raises(ValueError):
            self.config(environment=StripeEnvironment.PRODUCTION)


class TestContractScore:

    @pytest.mark.parametrize("score", [85, 72.5, "64", "7.5", None])
    def test_accepts_numbers_and_numeric_strings(self, score):
        assert Contract(overall_score=score).overall_score == score

    @pytest.mark.parametrize("score", ["high", True, [1]])
    def test_rejects_other_values(self, score):
        with pytest.raises(ValueError):
            Contract(overall_score=score)
