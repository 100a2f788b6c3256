"""
Subscription management for enterprise organizations and individual premium
"""

import logging
from typing import Dict, Any, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from auth.models import AuthenticatedPrincipal
from core.audit_logger import AuditLogger
from core.exceptions import NotFoundError
from core.notification_sender import NotificationSender
from models.audit_log import ResourceType
from models.organization import Organization, default_team_settings
from models.user import User, UserRole
from .exceptions import InvalidBillingPlanException
from .models import get_plan, features_for_plan, ENTERPRISE_PLANS, PlanType
from .stripe_client import StripeClient


logger = logging.getLogger(__name__)


class SubscriptionManager:
    """
    Starts checkouts and applies the results reported by Stripe webhooks.
    """

    def __init__(
        self,
        db: Session,
        stripe_client: StripeClient,
        audit: AuditLogger,
        notifier: Optional[NotificationSender] = None
    ):
        self.db = db
        self.stripe_client = stripe_client
        self.audit = audit
        self.notifier = notifier

    def start_checkout(self, principal: AuthenticatedPrincipal, plan_type: str) -> Dict[str, Any]:
        """
        Open a subscription checkout for the caller's organization.

        Returns:
            {"sessionId", "url"}

        Raises:
            InvalidBillingPlanException: Unknown plan tier
            NotFoundError: Organization does not exist
            StripeException: Checkout session creation failed
        """
        plan = get_plan(plan_type)

        organization = None
        if principal.organization_id is not None:
            organization = self.db.get(Organization, principal.organization_id)
        if organization is None:
            raise NotFoundError("Organization not found")

        session = self.stripe_client.create_subscription_checkout(
            customer_id=organization.stripe_customer_id,
            plan=plan,
            metadata={
                "organizationId": str(organization.id),
                "planType": plan.type.value,
                "maxUsers": str(plan.max_users),
            },
        )

        self.audit.record(
            principal,
            action="subscription_checkout",
            resource_type=ResourceType.ORGANIZATION,
            resource_id=organization.id,
            details=f"Started {plan.name} plan checkout (session {session['id']})",
        )
        return {"sessionId": session["id"], "url": session["url"]}

    def start_premium_checkout(self, principal: AuthenticatedPrincipal) -> Dict[str, Any]:
        """One-time lifetime premium checkout for the caller"""
        session = self.stripe_client.create_premium_checkout(
            customer_email=principal.email,
            user_id=str(principal.id),
        )
        return {"sessionId": session["id"], "url": session["url"]}

    def activate_organization_subscription(
        self,
        organization_id: str,
        plan_type: Optional[str],
        subscription_id: Optional[str]
    ) -> Organization:
        """
        Apply a paid plan to an organization.

        Unknown tiers fall back to the basic seat limit and features.

        Raises:
            NotFoundError: Organization does not exist
        """
        organization = None
        try:
            organization = self.db.get(Organization, UUID(str(organization_id)))
        except ValueError:
            logger.error(f"Malformed organization id in subscription event: {organization_id}")
        if organization is None:
            raise NotFoundError("Organization not found")

        try:
            plan = get_plan(plan_type)
        except InvalidBillingPlanException:
            logger.warning(f"Unknown plan type {plan_type!r} for organization {organization.id}; using basic")
            plan = ENTERPRISE_PLANS[PlanType.BASIC]

        if not subscription_id:
            logger.warning(f"Subscription event for organization {organization.id} carries no subscription id")

        settings = dict(organization.team_settings or default_team_settings())
        settings["customTemplates"] = plan.allows_custom_templates

        organization.plan_type = plan.type.value
        organization.max_users = plan.max_users
        organization.features = features_for_plan(plan.type.value)
        organization.stripe_subscription_id = subscription_id
        organization.team_settings = settings
        self.db.commit()
        self.db.refresh(organization)

        logger.info(f"Activated {plan.type.value} plan for organization {organization.id}")

        admin = self.db.query(User).filter(
            User.organization_id == organization.id,
            User.role == UserRole.ADMIN.value
        ).first()
        if admin is None:
            logger.warning(f"No admin found for organization {organization.id}; skipping audit entry")
        else:
            self.audit.record_event(
                organization_id=organization.id,
                user_id=admin.id,
                action="subscription_activated",
                resource_type=ResourceType.ORGANIZATION,
                resource_id=organization.id,
                details=f"Activated {plan.name} plan with {plan.max_users} seats",
            )

        return organization

    async def mark_user_premium(self, user_id: str) -> User:
        """
        Grant individual premium after a completed one-time payment.

        Raises:
            NotFoundError: User does not exist
        """
        user = None
        try:
            user = self.db.get(User, UUID(str(user_id)))
        except ValueError:
            logger.error(f"Malformed user id in payment event: {user_id}")
        if user is None:
            raise NotFoundError("User not found")

        user.is_premium = True
        self.db.commit()
        logger.info(f"User {user.id} upgraded to premium")

        if self.notifier is not None:
            await self.notifier.send_premium_confirmation(user.email, user.display_name)
        return user
