import logging
from supabase import Client
from access_control.core.exceptions import InternalError, RoleNotFoundError
from access_control.core.store import SupabaseRbacStore
from access_control.modules.roles.schemas import RoleAssignResponse, UserRolesResponse

logger = logging.getLogger(__name__)


class RoleAssignmentService:
    """User-management workflows that create and delete user_roles rows"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_role_id(self, role_name: str) -> str:
        try:
            result = self.supabase.table("roles")\
                .select("id")\
                .eq("name", role_name)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error looking up role {role_name}: {e}")
            raise InternalError("Failed to look up role") from e
        if not result.data:
            raise RoleNotFoundError(role_name)
        return result.data[0]["id"]

    def list_user_roles(self, user_id: str) -> UserRolesResponse:
        roles = SupabaseRbacStore(self.supabase).role_names_for_user(user_id)
        return UserRolesResponse(user_id=user_id, roles=sorted(roles))

    def assign_role(self, user_id: str, role_name: str) -> RoleAssignResponse:
        """Assign a role to a user. Assigning an already-held role is a no-op."""
        role_id = self._get_role_id(role_name)
        try:
            existing = self.supabase.table("user_roles")\
                .select("role_id")\
                .eq("user_id", user_id)\
                .eq("role_id", role_id)\
                .execute()
            if existing.data:
                return RoleAssignResponse(
                    user_id=user_id,
                    role_name=role_name,
                    assigned=False,
                    message="Role already assigned"
                )
            self.supabase.table("user_roles").insert({
                "user_id": user_id,
                "role_id": role_id
            }).execute()
        except Exception as e:
            logger.error(f"Error assigning role {role_name} to user {user_id}: {e}")
            raise InternalError("Failed to assign role") from e
        logger.info(f"Assigned role {role_name} to user {user_id}")
        return RoleAssignResponse(
            user_id=user_id,
            role_name=role_name,
            assigned=True,
            message="Role assigned"
        )

    def revoke_role(self, user_id: str, role_name: str) -> bool:
        """Remove a role from a user. Returns False if the user did not hold it."""
        role_id = self._get_role_id(role_name)
        try:
            result = self.supabase.table("user_roles")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("role_id", role_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error revoking role {role_name} from user {user_id}: {e}")
            raise InternalError("Failed to revoke role") from e
        revoked = bool(result.data)
        if revoked:
            logger.info(f"Revoked role {role_name} from user {user_id}")
        return revoked
