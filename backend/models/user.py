"""
User model for account, membership and entitlement data.
"""

from enum import Enum

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship

from .base import BaseModel


class UserRole(str, Enum):
    """Role of a user inside an organization"""
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


ADMIN_PERMISSIONS = [
    "manage_users",
    "manage_billing",
    "manage_contracts",
    "create_templates",
]


class User(BaseModel):
    """Platform user, optionally a member of one organization."""

    __tablename__ = "users"

    # Identity
    email = Column(String(255), unique=True, nullable=False, index=True, doc="User email address")
    display_name = Column(String(255), nullable=False, doc="Name shown in the UI and in emails")
    profile_picture = Column(String(1024), nullable=True, doc="Avatar URL")
    external_id = Column(
        String(255),
        unique=True,
        nullable=False,
        doc="Identity provider subject, or a placeholder for invited users"
    )

    # Entitlements
    is_premium = Column(Boolean, default=False, nullable=False, doc="Individual premium purchased")
    is_enterprise = Column(Boolean, default=False, nullable=False, doc="Member of an enterprise organization")

    # Organization membership
    organization_id = Column(Uuid, ForeignKey("organizations.id"), nullable=True, index=True)
    role = Column(String(20), nullable=True, doc="admin, manager or member")
    permissions = Column(JSON, default=list, nullable=False, doc="Granted permission codenames")

    # Invitations
    invited_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    invite_token = Column(String(128), nullable=True, unique=True, index=True)
    invite_expires = Column(DateTime, nullable=True)

    organization = relationship("Organization", back_populates="members", foreign_keys=[organization_id])

    @property
    def is_placeholder(self) -> bool:
        return self.external_id.startswith("placeholder_")

    def __repr__(self) -> str:
        return f"<User(email='{self.email}', role='{self.role}')>"
