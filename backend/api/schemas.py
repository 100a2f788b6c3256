"""
Request and response bodies for the enterprise, organization and payment APIs.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Requests

class CreateOrganizationRequest(CamelModel):
    organization_name: str = Field(..., min_length=1)
    domain: str = Field(..., min_length=1)
    billing_email: EmailStr


class InviteMemberRequest(CamelModel):
    email: EmailStr
    role: str = Field(..., min_length=1)


class UpdateSettingsRequest(CamelModel):
    settings: Dict[str, Any]


class AcceptInviteRequest(CamelModel):
    token: str = Field(..., min_length=1)
    display_name: Optional[str] = None


class ShareContractRequest(CamelModel):
    contract_id: str = Field(..., min_length=1)
    shared_with: List[str]
    access_level: Optional[str] = None
    message: Optional[str] = None


class CommentRequest(CamelModel):
    text: str = Field(..., min_length=1, max_length=5000)


class CreateSubscriptionRequest(CamelModel):
    plan_type: str = Field(..., min_length=1)


# Responses

class UserOut(CamelModel):
    id: UUID
    email: str
    display_name: str
    profile_picture: Optional[str] = None
    organization_id: Optional[UUID] = None
    role: Optional[str] = None
    permissions: List[str] = []
    is_enterprise: bool
    is_premium: bool


class OrganizationOut(CamelModel):
    id: UUID
    name: str
    domain: str
    plan_type: str
    max_users: int
    features: List[str]
    billing_email: str
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    admins: List[str]
    team_settings: Dict[str, Any]
    created_at: datetime
    updated_at: datetime


class TeamContractOut(CamelModel):
    id: UUID
    contract_id: UUID
    organization_id: UUID
    shared_by: UUID
    shared_with: List[str]
    access_level: str
    status: str
    version: int
    history: List[Dict[str, Any]]
    comments: List[Dict[str, Any]]
    tags: List[str]
    created_at: datetime
    updated_at: datetime


class ContractSummaryOut(CamelModel):
    id: UUID
    contract_type: str
    summary: str
    overall_score: Optional[Union[float, str]] = None
    created_at: datetime


class SharerOut(CamelModel):
    id: UUID
    display_name: str
    email: str


class OrgContractOut(TeamContractOut):
    """Team contract with its contract summary and sharer resolved"""
    contract: Optional[ContractSummaryOut] = None
    sharer: Optional[SharerOut] = None


class AuditLogOut(CamelModel):
    id: UUID
    organization_id: UUID
    user_id: UUID
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    details: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime


class CreateOrganizationResponse(CamelModel):
    success: bool = True
    organization: OrganizationOut


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class AcceptInviteResponse(CamelModel):
    success: bool = True
    user: UserOut
    access_token: str


class TeamContractResponse(CamelModel):
    success: bool = True
    team_contract: TeamContractOut


class CheckoutSessionResponse(CamelModel):
    session_id: str
    url: Optional[str] = None


class PremiumStatusResponse(CamelModel):
    status: str


class WebhookAckResponse(CamelModel):
    received: bool = True
