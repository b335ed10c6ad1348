from fastapi import APIRouter, Depends
from access_control.core.dependencies import require_permission
from access_control.core.guard import GuardContext
from access_control.database.supabase_client import get_supabase_service
from access_control.modules.roles.schemas import RoleAssign, RoleAssignResponse, UserRolesResponse
from access_control.modules.roles.service import RoleAssignmentService
from supabase import Client

router = APIRouter(prefix="/users/{user_id}/roles", tags=["roles"])


def get_role_assignment_service(supabase: Client = Depends(get_supabase_service)) -> RoleAssignmentService:
    return RoleAssignmentService(supabase)


@router.get("", response_model=UserRolesResponse)
def list_user_roles(
    user_id: str,
    ctx: GuardContext = Depends(require_permission("roles.read")),
    service: RoleAssignmentService = Depends(get_role_assignment_service)
):
    """List roles assigned to a user"""
    return service.list_user_roles(user_id)


@router.post("", response_model=RoleAssignResponse, status_code=200)
def assign_role(
    user_id: str,
    role_assign: RoleAssign,
    ctx: GuardContext = Depends(require_permission("roles.assign")),
    service: RoleAssignmentService = Depends(get_role_assignment_service)
):
    """Assign a role to a user (idempotent)"""
    return service.assign_role(user_id, role_assign.role_name)


@router.delete("/{role_name}", status_code=204)
def revoke_role(
    user_id: str,
    role_name: str,
    ctx: GuardContext = Depends(require_permission("roles.assign")),
    service: RoleAssignmentService = Depends(get_role_assignment_service)
):
    """Revoke a role from a user"""
    service.revoke_role(user_id, role_name)
    return None
