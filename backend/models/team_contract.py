"""
Team contract model: the sharing wrapper around a contract inside an organization.
"""

from enum import Enum

from sqlalchemy import Column, String, Integer, ForeignKey, JSON, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel


class AccessLevel(str, Enum):
    """Permission granted to the sharing audience"""
    VIEW = "view"
    COMMENT = "comment"
    EDIT = "edit"


class TeamContractStatus(str, Enum):
    """Review status of a shared contract"""
    DRAFT = "draft"
    IN_REVIEW = "in-review"
    APPROVED = "approved"
    REJECTED = "rejected"


class TeamContract(BaseModel):
    """
    One row per (contract, organization) pair.

    ``shared_with`` holds user ids as strings; ``history`` and ``comments``
    are append-only lists of dicts. JSON columns are replaced, never mutated
    in place, so SQLAlchemy sees every change.
    """

    __tablename__ = "team_contracts"

    contract_id = Column(Uuid, ForeignKey("contracts.id"), nullable=False, index=True)
    organization_id = Column(Uuid, ForeignKey("organizations.id"), nullable=False, index=True)
    shared_by = Column(Uuid, ForeignKey("users.id"), nullable=False)

    shared_with = Column(JSON, default=list, nullable=False)
    access_level = Column(String(20), default=AccessLevel.VIEW.value, nullable=False)
    status = Column(String(20), default=TeamContractStatus.DRAFT.value, nullable=False)
    version = Column(Integer, default=1, nullable=False)

    history = Column(JSON, default=list, nullable=False, doc="[{changedBy, timestamp, action, details}]")
    comments = Column(JSON, default=list, nullable=False, doc="[{userId, text, timestamp}]")
    tags = Column(JSON, default=list, nullable=False)

    contract = relationship("Contract")
    sharer = relationship("User", foreign_keys=[shared_by])

    __table_args__ = (
        UniqueConstraint("contract_id", "organization_id", name="uq_team_contracts_contract_org"),
    )

    def __repr__(self) -> str:
        return f"<TeamContract(contract_id={self.contract_id}, organization_id={self.organization_id})>"
