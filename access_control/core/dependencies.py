"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from access_control.config import settings
from access_control.core.decisions import AccessDecisionEngine
from access_control.core.guard import GuardContext, admin_guard, authenticated_guard, permission_guard
from access_control.core.permissions import PermissionName
from access_control.core.store import RbacStore, SupabaseRbacStore
from access_control.database.supabase_client import get_supabase
from access_control.modules.auth.service import SessionResolver, StaticSessionResolver, SupabaseSessionResolver
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# auto_error disabled so a missing header becomes UnauthenticatedError, not a bare 403
security = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Optional[str]:
    """Extract JWT token from Authorization header"""
    return credentials.credentials if credentials else None


def get_session_resolver() -> SessionResolver:
    if settings.uses_testing_auth:
        return StaticSessionResolver()
    return SupabaseSessionResolver(
        get_supabase(),
        cache_ttl_sec=settings.auth_cache_ttl_sec,
        cache_max_size=settings.auth_cache_max_size,
    )


def get_rbac_store(supabase: Client = Depends(get_supabase)) -> RbacStore:
    return SupabaseRbacStore(supabase)


def get_access_engine(store: RbacStore = Depends(get_rbac_store)) -> AccessDecisionEngine:
    return AccessDecisionEngine.from_store(store)


def require_authenticated(
    token: Optional[str] = Depends(get_bearer_token),
    sessions: SessionResolver = Depends(get_session_resolver),
) -> GuardContext:
    """Dependency that only requires a valid session"""
    return authenticated_guard(sessions).evaluate(token)


def require_admin(
    token: Optional[str] = Depends(get_bearer_token),
    sessions: SessionResolver = Depends(get_session_resolver),
    engine: AccessDecisionEngine = Depends(get_access_engine),
) -> GuardContext:
    """Dependency that requires one of the admin roles"""
    return admin_guard(sessions, engine).evaluate(token)


def require_permission(required_permission: str):
    """Factory function to create permission check dependency.

    The name is validated here, when the route is declared.
    """
    permission = PermissionName(required_permission)

    def check_permission(
        token: Optional[str] = Depends(get_bearer_token),
        sessions: SessionResolver = Depends(get_session_resolver),
        engine: AccessDecisionEngine = Depends(get_access_engine),
    ) -> GuardContext:
        """Dependency to check if user has required permission"""
        return permission_guard(sessions, engine, permission).evaluate(token)
    return check_permission
