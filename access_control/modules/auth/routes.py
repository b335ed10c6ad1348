from fastapi import APIRouter, Depends
from access_control.core.decisions import AccessDecisionEngine
from access_control.core.dependencies import get_access_engine, require_authenticated
from access_control.core.guard import GuardContext, resolve_roles
from access_control.modules.auth.schemas import MeResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=MeResponse)
def get_current_user(
    ctx: GuardContext = Depends(require_authenticated),
    engine: AccessDecisionEngine = Depends(get_access_engine),
):
    """Get current authenticated user and their roles (for frontend UI)."""
    ctx = resolve_roles(engine)(ctx)
    return MeResponse(
        id=ctx.principal.id,
        email=ctx.principal.email,
        name=ctx.principal.name,
        roles=sorted(ctx.roles),
        is_admin=engine.is_admin(ctx.roles),
    )
