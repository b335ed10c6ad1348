from fastapi import APIRouter, Depends
from access_control.config import settings
from access_control.core.decisions import AccessDecisionEngine
from access_control.core.dependencies import (
    get_access_engine,
    get_bearer_token,
    get_rbac_store,
    get_session_resolver,
    require_authenticated,
)
from access_control.core.guard import GuardContext, admin_guard, authenticated_guard
from access_control.core.store import RbacStore
from access_control.modules.auth.service import SessionResolver
from access_control.modules.cms.schemas import AccessCheckResponse, RoleSummary
from access_control.modules.cms.service import CmsAccessService
from typing import List, Optional

router = APIRouter(prefix="/cms", tags=["cms"])


def get_cms_service(store: RbacStore = Depends(get_rbac_store)) -> CmsAccessService:
    return CmsAccessService(store)


def require_roles_listing_access(
    token: Optional[str] = Depends(get_bearer_token),
    sessions: SessionResolver = Depends(get_session_resolver),
    engine: AccessDecisionEngine = Depends(get_access_engine),
) -> GuardContext:
    """Role listing needs a session; the admin gate is opt-in via ROLES_LISTING_REQUIRES_ADMIN"""
    if settings.roles_listing_requires_admin:
        return admin_guard(sessions, engine).evaluate(token)
    return authenticated_guard(sessions).evaluate(token)


@router.get("/access", response_model=AccessCheckResponse)
def check_access(
    ctx: GuardContext = Depends(require_authenticated),
    service: CmsAccessService = Depends(get_cms_service),
):
    """Check whether the current user may enter the admin area"""
    return service.check_access(ctx.principal_id)


@router.get("/roles", response_model=List[RoleSummary])
def list_roles(
    ctx: GuardContext = Depends(require_roles_listing_access),
    service: CmsAccessService = Depends(get_cms_service),
):
    """List all provisioned roles"""
    return service.list_roles()
