"""
Permission guards for enterprise routes.

Each guard is a FastAPI dependency that either returns the principal or
rejects the request before the handler runs.
"""

from fastapi import Depends

from core.exceptions import AuthorizationDeniedError
from models.user import UserRole
from .jwt_auth import get_current_principal
from .models import AuthenticatedPrincipal


def is_enterprise_member(principal: AuthenticatedPrincipal) -> bool:
    return principal.is_enterprise_member


def is_org_admin(principal: AuthenticatedPrincipal) -> bool:
    return is_enterprise_member(principal) and principal.role == UserRole.ADMIN.value


def is_org_manager(principal: AuthenticatedPrincipal) -> bool:
    return is_enterprise_member(principal) and principal.role in (
        UserRole.ADMIN.value,
        UserRole.MANAGER.value,
    )


async def require_enterprise_member(
    principal: AuthenticatedPrincipal = Depends(get_current_principal)
) -> AuthenticatedPrincipal:
    if not is_enterprise_member(principal):
        raise AuthorizationDeniedError("This feature requires an enterprise account")
    return principal


async def require_org_admin(
    principal: AuthenticatedPrincipal = Depends(get_current_principal)
) -> AuthenticatedPrincipal:
    if not is_org_admin(principal):
        raise AuthorizationDeniedError("This action requires admin privileges")
    return principal


async def require_org_manager(
    principal: AuthenticatedPrincipal = Depends(get_current_principal)
) -> AuthenticatedPrincipal:
    if not is_org_manager(principal):
        raise AuthorizationDeniedError("This action requires admin or manager privileges")
    return principal
