"""
Organization model for multi-tenancy support.
"""

from sqlalchemy import Column, String, Integer, JSON
from sqlalchemy.orm import relationship

from .base import BaseModel


DEFAULT_MAX_USERS = 5

DEFAULT_FEATURES = [
    "team-collaboration",
    "contract-sharing",
    "analytics-dashboard",
]


def default_team_settings() -> dict:
    return {
        "allowPublicContracts": False,
        "requireApproval": True,
        "customTemplates": False,
        "dataRetentionDays": 365,
        "auditLoggingEnabled": False,
    }


class Organization(BaseModel):
    """An enterprise customer: owns its members, shared contracts and audit trail."""

    __tablename__ = "organizations"

    # Basic info
    name = Column(String(255), nullable=False, doc="Organization name")
    domain = Column(String(255), unique=True, nullable=False, doc="Company domain, one organization per domain")

    # Plan
    plan_type = Column(String(50), default="basic", nullable=False, doc="basic, professional or enterprise")
    max_users = Column(Integer, default=DEFAULT_MAX_USERS, nullable=False, doc="Seat limit")
    features = Column(JSON, default=lambda: list(DEFAULT_FEATURES), nullable=False, doc="Enabled feature flags")

    # Billing
    billing_email = Column(String(255), nullable=False, doc="Invoice recipient")
    stripe_customer_id = Column(String(255), nullable=True)
    stripe_subscription_id = Column(String(255), nullable=True)

    # Administration
    admins = Column(JSON, default=list, nullable=False, doc="User ids with admin rights")
    team_settings = Column(JSON, default=default_team_settings, nullable=False, doc="Workspace settings")

    # Relationships
    members = relationship("User", back_populates="organization", foreign_keys="User.organization_id")

    def __repr__(self) -> str:
        return f"<Organization(name='{self.name}', domain='{self.domain}')>"
