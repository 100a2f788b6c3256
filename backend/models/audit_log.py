"""
Audit Log Database Model

Append-only record of state-changing actions inside an organization.
"""

import uuid
from enum import Enum

from sqlalchemy import Column, String, DateTime, Text, Index, ForeignKey, Uuid

from .base import Base, utcnow


class ResourceType(str, Enum):
    """Kind of resource an audit entry refers to"""
    CONTRACT = "contract"
    USER = "user"
    ORGANIZATION = "organization"
    PAYMENT = "payment"
    TEMPLATE = "template"
    SETTINGS = "settings"


class AuditLog(Base):
    """
    Audit log table for compliance and retention.

    Rows are written once and never updated or deleted by the application.
    """
    __tablename__ = "audit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    organization_id = Column(Uuid, ForeignKey("organizations.id"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    action = Column(String(100), nullable=False, index=True)
    resource_type = Column(String(20), nullable=False)
    resource_id = Column(String(255), nullable=True)
    details = Column(Text, nullable=False)

    # Client information
    ip_address = Column(String(45), nullable=True)  # IPv6 support
    user_agent = Column(Text, nullable=True)

    timestamp = Column(DateTime, default=utcnow, nullable=False, index=True)

    __table_args__ = (
        Index("ix_audit_logs_org_time", "organization_id", "timestamp"),
    )

    def __repr__(self):
        return f"<AuditLog(action='{self.action}', organization_id='{self.organization_id}')>"

    def to_dict(self) -> dict:
        """Convert audit log to dictionary"""
        return {
            "id": str(self.id),
            "organizationId": str(self.organization_id),
            "userId": str(self.user_id),
            "action": self.action,
            "resourceType": self.resource_type,
            "resourceId": self.resource_id,
            "details": self.details,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
