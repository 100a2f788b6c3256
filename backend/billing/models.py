"""
Billing data models: enterprise plan catalogue and classified webhook events.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from .exceptions import InvalidBillingPlanException


class PlanType(str, Enum):
    """Enterprise plan tiers"""
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


BASE_FEATURES = [
    "team-collaboration",
    "contract-sharing",
    "analytics-dashboard",
]

PROFESSIONAL_FEATURES = BASE_FEATURES + [
    "advanced-analytics",
    "custom-templates",
    "bulk-upload",
]

ENTERPRISE_FEATURES = PROFESSIONAL_FEATURES + [
    "sso-integration",
    "audit-logs",
    "api-access",
    "dedicated-support",
]


@dataclass(frozen=True)
class EnterprisePlan:
    """Static price / seat limit / feature set triple for one tier"""
    type: PlanType
    name: str
    stripe_price_id: str
    max_users: int
    price_monthly: Decimal
    features: List[str] = field(default_factory=list)

    @property
    def allows_custom_templates(self) -> bool:
        return self.type != PlanType.BASIC


ENTERPRISE_PLANS: Dict[PlanType, EnterprisePlan] = {
    PlanType.BASIC: EnterprisePlan(
        type=PlanType.BASIC,
        name="Basic",
        stripe_price_id="price_enterprise_basic_monthly",
        max_users=10,
        price_monthly=Decimal("199.00"),
        features=BASE_FEATURES,
    ),
    PlanType.PROFESSIONAL: EnterprisePlan(
        type=PlanType.PROFESSIONAL,
        name="Professional",
        stripe_price_id="price_enterprise_pro_monthly",
        max_users=25,
        price_monthly=Decimal("499.00"),
        features=PROFESSIONAL_FEATURES,
    ),
    PlanType.ENTERPRISE: EnterprisePlan(
        type=PlanType.ENTERPRISE,
        name="Enterprise",
        stripe_price_id="price_enterprise_unlimited_monthly",
        max_users=100,
        price_monthly=Decimal("999.00"),
        features=ENTERPRISE_FEATURES,
    ),
}


def get_plan(plan_type: Optional[str]) -> EnterprisePlan:
    """
    Look up a plan by its tier name.

    Raises:
        InvalidBillingPlanException: If the tier is unknown
    """
    try:
        return ENTERPRISE_PLANS[PlanType(plan_type)]
    except ValueError:
        raise InvalidBillingPlanException(plan_type)


def features_for_plan(plan_type: Optional[str]) -> List[str]:
    """Feature list granted at activation; unknown tiers get the basic set"""
    try:
        return list(get_plan(plan_type).features)
    except InvalidBillingPlanException:
        return list(BASE_FEATURES)


# Verified webhook events, classified before anything acts on them

@dataclass
class IndividualPayment:
    """One-time premium purchase by a single user"""
    event_id: str
    user_id: str


@dataclass
class OrganizationSubscription:
    """Enterprise plan purchased for an organization"""
    event_id: str
    event_type: str
    organization_id: str
    plan_type: Optional[str]
    subscription_id: Optional[str]


@dataclass
class Unhandled:
    """Verified event this service does not act on"""
    event_id: str
    event_type: str


BillingEvent = Union[IndividualPayment, OrganizationSubscription, Unhandled]
