"""
Read-side store contract for role and permission lookups
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List

from supabase import Client

from access_control.core.exceptions import InternalError

logger = logging.getLogger(__name__)


class RbacStore(ABC):
    """Read access to roles, permissions, role_permissions and user_roles.

    Implementations re-read on every call and raise InternalError on failure.
    """

    @abstractmethod
    def role_names_for_user(self, user_id: str) -> FrozenSet[str]:
        ...

    @abstractmethod
    def user_has_permission(self, user_id: str, permission_name: str) -> bool:
        ...

    @abstractmethod
    def list_roles(self) -> List[Dict[str, Any]]:
        ...


class SupabaseRbacStore(RbacStore):
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _user_role_ids(self, user_id: str) -> List[str]:
        result = self.supabase.table("user_roles")\
            .select("role_id")\
            .eq("user_id", user_id)\
            .execute()
        return list({r["role_id"] for r in result.data}) if result.data else []

    def role_names_for_user(self, user_id: str) -> FrozenSet[str]:
        """Join user_roles -> roles for one user and return the role names"""
        try:
            role_ids = self._user_role_ids(user_id)
            if not role_ids:
                return frozenset()
            result = self.supabase.table("roles")\
                .select("name")\
                .in_("id", role_ids)\
                .execute()
            return frozenset(r["name"] for r in result.data) if result.data else frozenset()
        except Exception as e:
            logger.error(f"Error loading roles for user {user_id}: {e}")
            raise InternalError("Failed to load user roles") from e

    def user_has_permission(self, user_id: str, permission_name: str) -> bool:
        """True if any role held by the user is granted the named permission"""
        try:
            role_ids = self._user_role_ids(user_id)
            if not role_ids:
                return False
            permission_result = self.supabase.table("permissions")\
                .select("id")\
                .eq("name", permission_name)\
                .limit(1)\
                .execute()
            if not permission_result.data:
                return False
            grant_result = self.supabase.table("role_permissions")\
                .select("role_id")\
                .eq("permission_id", permission_result.data[0]["id"])\
                .in_("role_id", role_ids)\
                .limit(1)\
                .execute()
            return bool(grant_result.data)
        except Exception as e:
            logger.error(f"Error checking permission {permission_name} for user {user_id}: {e}")
            raise InternalError("Failed to check permission") from e

    def list_roles(self) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table("roles")\
                .select("id, name, description")\
                .order("name")\
                .execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error listing roles: {e}")
            raise InternalError("Failed to list roles") from e
