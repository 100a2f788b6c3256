"""
Organization API Endpoints

Read the caller's organization, invite members (admins and managers) and
update team settings.
"""

import logging

from fastapi import APIRouter, Depends

from auth.models import AuthenticatedPrincipal
from auth.permissions import require_enterprise_member, require_org_admin, require_org_manager
from core.exceptions import ServiceError, UpstreamFailureError
from core.organization_service import OrganizationService
from .dependencies import get_organization_service
from .schemas import InviteMemberRequest, MessageResponse, OrganizationOut, UpdateSettingsRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/organization", tags=["organization"])


@router.get("", response_model=OrganizationOut)
async def get_organization(
    principal: AuthenticatedPrincipal = Depends(require_enterprise_member),
    service: OrganizationService = Depends(get_organization_service)
):
    try:
        organization = service.get_organization(principal)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Get organization error: {e}")
        raise UpstreamFailureError("Failed to get organization", str(e))

    return OrganizationOut.model_validate(organization)


@router.post("/invite", response_model=MessageResponse)
async def invite_team_member(
    request: InviteMemberRequest,
    principal: AuthenticatedPrincipal = Depends(require_org_manager),
    service: OrganizationService = Depends(get_organization_service)
):
    """Invite a user; open to admins and managers"""
    try:
        await service.invite_member(principal, request.email, request.role)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Invite team member error: {e}")
        raise UpstreamFailureError("Failed to invite team member", str(e))

    return MessageResponse(message=f"Invitation sent to {request.email}")


@router.put("/settings", response_model=OrganizationOut)
async def update_organization_settings(
    request: UpdateSettingsRequest,
    principal: AuthenticatedPrincipal = Depends(require_org_admin),
    service: OrganizationService = Depends(get_organization_service)
):
    """Replace the organization's team settings"""
    try:
        organization = service.update_settings(principal, request.settings)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Update organization settings error: {e}")
        raise UpstreamFailureError("Failed to update organization settings", str(e))

    return OrganizationOut.model_validate(organization)
