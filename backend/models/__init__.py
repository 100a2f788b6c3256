"""
Database Models Package

Record kinds persisted by the enterprise backend.
"""

from .base import Base
from .user import User, UserRole
from .organization import Organization
from .contract import Contract
from .team_contract import TeamContract, AccessLevel, TeamContractStatus
from .audit_log import AuditLog, ResourceType

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Organization",
    "Contract",
    "TeamContract",
    "AccessLevel",
    "TeamContractStatus",
    "AuditLog",
    "ResourceType"
]
