"""
Enterprise API Endpoints

Organization creation, team invitations, contract sharing, enterprise
subscriptions and the organization audit trail.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from auth.jwt_auth import get_current_principal, issue_token_for
from auth.models import AuthenticatedPrincipal
from auth.permissions import require_enterprise_member, require_org_admin
from billing.subscription_manager import SubscriptionManager
from core.contract_sharing import ContractSharingService
from core.exceptions import ServiceError, UpstreamFailureError
from core.organization_service import OrganizationService
from database import get_db
from models.audit_log import AuditLog
from .dependencies import (
    get_contract_sharing_service,
    get_organization_service,
    get_subscription_manager
)
from .schemas import (
    AcceptInviteRequest,
    AcceptInviteResponse,
    AuditLogOut,
    CheckoutSessionResponse,
    CommentRequest,
    CreateOrganizationRequest,
    CreateOrganizationResponse,
    CreateSubscriptionRequest,
    InviteMemberRequest,
    MessageResponse,
    OrganizationOut,
    OrgContractOut,
    ShareContractRequest,
    TeamContractOut,
    TeamContractResponse,
    UserOut
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/enterprise", tags=["enterprise"])


@router.post(
    "/create-organization",
    response_model=CreateOrganizationResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_organization(
    request: CreateOrganizationRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: OrganizationService = Depends(get_organization_service)
):
    """Create an organization with the caller as founding admin"""
    try:
        organization = await service.create_organization(
            principal,
            name=request.organization_name,
            domain=request.domain,
            billing_email=request.billing_email,
        )
    except ServiceError as e:
        if e.status_code >= 500:
            raise UpstreamFailureError("Failed to create organization", e.reason or e.message)
        raise
    except Exception as e:
        logger.error(f"Organization creation error: {e}")
        raise UpstreamFailureError("Failed to create organization", str(e))

    return CreateOrganizationResponse(organization=OrganizationOut.model_validate(organization))


@router.post("/invite", response_model=MessageResponse)
async def invite_team_member(
    request: InviteMemberRequest,
    principal: AuthenticatedPrincipal = Depends(require_org_admin),
    service: OrganizationService = Depends(get_organization_service)
):
    """Invite a user into the caller's organization"""
    try:
        await service.invite_member(principal, request.email, request.role)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Invite team member error: {e}")
        raise UpstreamFailureError("Failed to invite team member", str(e))

    return MessageResponse(message=f"Invitation sent to {request.email}")


@router.post("/accept-invite", response_model=AcceptInviteResponse)
async def accept_invite(
    request: AcceptInviteRequest,
    service: OrganizationService = Depends(get_organization_service)
):
    """Claim an invitation token and receive an access token"""
    try:
        user, _ = service.accept_invite(request.token, request.display_name)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Accept invite error: {e}")
        raise UpstreamFailureError("Failed to accept invitation", str(e))

    return AcceptInviteResponse(
        user=UserOut.model_validate(user),
        access_token=issue_token_for(user),
    )


@router.post("/share-contract", response_model=TeamContractResponse)
async def share_contract_with_team(
    request: ShareContractRequest,
    principal: AuthenticatedPrincipal = Depends(require_enterprise_member),
    service: ContractSharingService = Depends(get_contract_sharing_service)
):
    """Share one of the caller's contracts with organization members"""
    try:
        team_contract = service.share_contract(
            principal,
            contract_id=request.contract_id,
            shared_with=request.shared_with,
            access_level=request.access_level,
            message=request.message,
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Contract sharing error: {e}")
        raise UpstreamFailureError("Failed to share contract", str(e))

    return TeamContractResponse(team_contract=TeamContractOut.model_validate(team_contract))


@router.get("/org-contracts", response_model=List[OrgContractOut])
async def get_organization_contracts(
    principal: AuthenticatedPrincipal = Depends(require_enterprise_member),
    service: ContractSharingService = Depends(get_contract_sharing_service)
):
    """Team contracts the caller shared or was given access to"""
    try:
        team_contracts = service.list_org_contracts(principal)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Organization contracts error: {e}")
        raise UpstreamFailureError("Failed to get organization contracts", str(e))

    return [OrgContractOut.model_validate(team_contract) for team_contract in team_contracts]


@router.post("/team-contracts/{team_contract_id}/comments", response_model=TeamContractResponse)
async def comment_on_team_contract(
    team_contract_id: str,
    request: CommentRequest,
    principal: AuthenticatedPrincipal = Depends(require_enterprise_member),
    service: ContractSharingService = Depends(get_contract_sharing_service)
):
    try:
        team_contract = await service.add_comment(principal, team_contract_id, request.text)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Team contract comment error: {e}")
        raise UpstreamFailureError("Failed to add comment", str(e))

    return TeamContractResponse(team_contract=TeamContractOut.model_validate(team_contract))


@router.post("/create-subscription", response_model=CheckoutSessionResponse)
async def create_enterprise_subscription(
    request: CreateSubscriptionRequest,
    principal: AuthenticatedPrincipal = Depends(require_org_admin),
    manager: SubscriptionManager = Depends(get_subscription_manager)
):
    """Start a Stripe checkout for an enterprise plan"""
    try:
        session = manager.start_checkout(principal, request.plan_type)
    except ServiceError as e:
        if e.status_code >= 500:
            raise UpstreamFailureError("Failed to create subscription", e.reason or e.message)
        raise
    except Exception as e:
        logger.error(f"Enterprise subscription error: {e}")
        raise UpstreamFailureError("Failed to create subscription", str(e))

    return CheckoutSessionResponse(**session)


@router.get("/audit-logs", response_model=List[AuditLogOut])
async def list_audit_logs(
    limit: int = Query(100, ge=1, le=500),
    principal: AuthenticatedPrincipal = Depends(require_org_admin),
    db: Session = Depends(get_db)
):
    """Most recent audit entries of the caller's organization"""
    try:
        entries = db.query(AuditLog).filter(
            AuditLog.organization_id == principal.organization_id
        ).order_by(AuditLog.timestamp.desc()).limit(limit).all()
    except Exception as e:
        logger.error(f"Audit log query error: {e}")
        raise UpstreamFailureError("Failed to get audit logs", str(e))

    return [AuditLogOut.model_validate(entry) for entry in entries]
