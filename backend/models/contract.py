"""
Contract analysis model.

Rows are produced by the analysis pipeline; this service only reads them and
wraps them in team sharing records.
"""

from sqlalchemy import Column, String, Text, Integer, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship, validates

from .base import BaseModel


class Contract(BaseModel):
    """Analysed contract owned by a single user."""

    __tablename__ = "contracts"

    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True, doc="Owner")
    organization_id = Column(Uuid, ForeignKey("organizations.id"), nullable=True, index=True)

    contract_text = Column(Text, nullable=False)
    contract_type = Column(String(100), nullable=False)
    summary = Column(Text, nullable=False)

    # Extracted analysis
    risks = Column(JSON, default=list, nullable=False, doc="[{risk, explanation, severity}]")
    opportunities = Column(JSON, default=list, nullable=False, doc="[{opportunity, explanation, impact}]")
    recommendations = Column(JSON, default=list, nullable=False)
    key_clauses = Column(JSON, default=list, nullable=False)
    negotiation_points = Column(JSON, default=list, nullable=False)
    overall_score = Column(JSON, nullable=True, doc="Numeric score, or a numeric string")
    language = Column(String(10), default="en", nullable=False)
    version = Column(Integer, default=1, nullable=False)

    owner = relationship("User", foreign_keys=[user_id])

    @validates("overall_score")
    def validate_overall_score(self, key, value):
        if value is None:
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            try:
                float(value)
                return value
            except ValueError:
                pass
        raise ValueError(f"{value!r} is not a valid score number or string")

    def __repr__(self) -> str:
        return f"<Contract(id={self.id}, type='{self.contract_type}')>"
