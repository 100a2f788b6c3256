"""
Authentication related Pydantic models
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TokenData(BaseModel):
    """Token payload data"""
    user_id: Optional[str] = None
    email: Optional[str] = None


class AuthenticatedPrincipal(BaseModel):
    """
    The caller of a request, resolved once at the authentication boundary.

    Handlers receive this instead of the ORM row so that guards and services
    depend on a fixed, typed shape.
    """
    id: UUID
    email: str
    display_name: str
    organization_id: Optional[UUID] = None
    role: Optional[str] = None
    is_enterprise: bool = False
    is_premium: bool = False

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def is_enterprise_member(self) -> bool:
        return self.is_enterprise and self.organization_id is not None
