"""
Authentication and authorization module
"""

from .jwt_auth import (
    JWTAuthenticator,
    get_current_user,
    get_current_principal,
    create_access_token,
    issue_token_for
)
from .models import AuthenticatedPrincipal
from .permissions import (
    require_enterprise_member,
    require_org_admin,
    require_org_manager
)

__all__ = [
    "JWTAuthenticator",
    "get_current_user",
    "get_current_principal",
    "create_access_token",
    "issue_token_for",
    "AuthenticatedPrincipal",
    "require_enterprise_member",
    "require_org_admin",
    "require_org_manager"
]
