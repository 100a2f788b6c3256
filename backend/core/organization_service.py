"""
Organization Lifecycle

Creating an organization, inviting members into it, accepting invitations
and maintaining workspace settings.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth.models import AuthenticatedPrincipal
from billing.stripe_client import StripeClient
from models.audit_log import ResourceType
from models.base import utcnow
from models.organization import Organization, DEFAULT_FEATURES, DEFAULT_MAX_USERS, default_team_settings
from models.user import User, UserRole, ADMIN_PERMISSIONS
from .audit_logger import AuditLogger
from .exceptions import (
    ConflictError,
    NotFoundError,
    SeatLimitReachedError,
    ValidationFailedError
)
from .notification_sender import NotificationSender


logger = logging.getLogger(__name__)

INVITE_TTL = timedelta(days=7)

VALID_ROLES = {role.value for role in UserRole}


def generate_invite_token() -> str:
    """64 hex characters from 32 random bytes"""
    return secrets.token_hex(32)


def generate_placeholder_external_id() -> str:
    return f"placeholder_{secrets.token_hex(16)}"


class OrganizationService:
    """Organization and membership operations for one request"""

    def __init__(
        self,
        db: Session,
        audit: AuditLogger,
        notifier: NotificationSender,
        stripe_client: Optional[StripeClient] = None
    ):
        self.db = db
        self.audit = audit
        self.notifier = notifier
        self.stripe_client = stripe_client

    async def create_organization(
        self,
        principal: AuthenticatedPrincipal,
        name: str,
        domain: str,
        billing_email: str
    ) -> Organization:
        """
        Create an organization with the caller as its founding admin.

        Raises:
            ConflictError: If an organization already uses the domain
                or the caller already belongs to an organization
            StripeException: If the billing customer cannot be created
        """
        if self.db.query(Organization).filter(Organization.domain == domain).first():
            raise ConflictError("Organization with this domain already exists")

        user = self._load_user(principal)
        if user.organization_id is not None:
            raise ConflictError("User already belongs to an organization")

        customer_id = self.stripe_client.create_customer(
            email=billing_email,
            name=name,
            metadata={"organizationType": "enterprise"}
        )

        organization = Organization(
            name=name,
            domain=domain,
            billing_email=billing_email,
            stripe_customer_id=customer_id,
            plan_type="basic",
            max_users=DEFAULT_MAX_USERS,
            features=list(DEFAULT_FEATURES),
            admins=[str(user.id)],
            team_settings=default_team_settings(),
        )
        self.db.add(organization)

        try:
            self.db.flush()
            user.organization_id = organization.id
            user.role = UserRole.ADMIN.value
            user.permissions = list(ADMIN_PERMISSIONS)
            user.is_premium = True
            user.is_enterprise = True
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Concurrent organization create for domain {domain}: {e}")
            raise ConflictError("Organization with this domain already exists")

        self.db.refresh(organization)
        logger.info(f"Created organization {organization.id} ({domain}) for user {user.id}")

        self.audit.record_event(
            organization_id=organization.id,
            user_id=user.id,
            action="organization_created",
            resource_type=ResourceType.ORGANIZATION,
            resource_id=organization.id,
            details=f"Created organization {name}",
        )

        await self.notifier.send_enterprise_welcome(user.email, user.display_name, name)
        return organization

    def get_organization(self, principal: AuthenticatedPrincipal) -> Organization:
        organization = None
        if principal.organization_id is not None:
            organization = self.db.get(Organization, principal.organization_id)
        if organization is None:
            raise NotFoundError("Organization not found")
        return organization

    def count_members(self, organization_id) -> int:
        return self.db.query(func.count(User.id)).filter(
            User.organization_id == organization_id
        ).scalar()

    async def invite_member(self, principal: AuthenticatedPrincipal, email: str, role: str) -> User:
        """
        Add a user to the caller's organization and email them an invitation.

        An existing account is attached in place; otherwise a placeholder
        account is created that the invitee claims with the invite token.

        Raises:
            ValidationFailedError: Unknown role
            NotFoundError: Caller's organization does not exist
            SeatLimitReachedError: Organization is full
            ConflictError: Invitee belongs to another organization
        """
        if role not in VALID_ROLES:
            raise ValidationFailedError("Invalid role", f"Role must be one of: {', '.join(sorted(VALID_ROLES))}")

        organization = self.get_organization(principal)

        # Read-then-write: two concurrent invites may both pass this check
        if self.count_members(organization.id) >= organization.max_users:
            raise SeatLimitReachedError(organization.max_users)

        invite_token = generate_invite_token()
        invite_expires = utcnow() + INVITE_TTL

        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(
                email=email,
                display_name=email.split("@")[0],
                external_id=generate_placeholder_external_id(),
            )
            self.db.add(user)
            logger.info(f"Creating placeholder account for invitee {email}")
        elif user.organization_id is not None and user.organization_id != organization.id:
            raise ConflictError("User already belongs to another organization")

        user.organization_id = organization.id
        user.role = role
        user.is_enterprise = True
        user.invited_by = principal.id
        user.invite_token = invite_token
        user.invite_expires = invite_expires
        self.db.commit()

        self.audit.record(
            principal,
            action="user_invited",
            resource_type=ResourceType.USER,
            resource_id=user.id,
            details=f"Invited {email} as {role}",
        )

        await self.notifier.send_enterprise_invite(
            user_email=email,
            organization_name=organization.name,
            inviter_name=principal.display_name,
            invite_token=invite_token,
            role=role,
        )
        return user

    def update_settings(self, principal: AuthenticatedPrincipal, settings: dict) -> Organization:
        """Replace the organization's team settings"""
        organization = self.get_organization(principal)
        organization.team_settings = dict(settings)
        self.db.commit()
        self.db.refresh(organization)

        self.audit.record(
            principal,
            action="settings_updated",
            resource_type=ResourceType.SETTINGS,
            resource_id=organization.id,
            details="Updated team settings",
        )
        return organization

    def accept_invite(self, token: str, display_name: Optional[str] = None) -> Tuple[User, Organization]:
        """
        Claim an invitation by its token.

        Raises:
            NotFoundError: Unknown token
            ValidationFailedError: Token expired
        """
        user = self.db.query(User).filter(User.invite_token == token).first()
        if user is None:
            raise NotFoundError("Invalid invitation token")

        if user.invite_expires is None or user.invite_expires < utcnow():
            raise ValidationFailedError("Invitation has expired")

        user.invite_token = None
        user.invite_expires = None
        if display_name:
            user.display_name = display_name
        self.db.commit()
        self.db.refresh(user)

        organization = self.db.get(Organization, user.organization_id) if user.organization_id else None
        if organization is not None:
            self.audit.record_event(
                organization_id=organization.id,
                user_id=user.id,
                action="invite_accepted",
                resource_type=ResourceType.USER,
                resource_id=user.id,
                details=f"{user.email} joined {organization.name}",
            )

        logger.info(f"User {user.id} accepted invitation")
        return user, organization

    def _load_user(self, principal: AuthenticatedPrincipal) -> User:
        user = self.db.get(User, principal.id)
        if user is None:
            raise NotFoundError("User not found")
        return user
