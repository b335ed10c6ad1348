import logging
from typing import AbstractSet, FrozenSet

from access_control.config.roles_config import SUPERUSER_ROLE
from access_control.core.store import RbacStore

logger = logging.getLogger(__name__)


class RoleResolver:
    """Loads the role names held by a principal."""

    def __init__(self, store: RbacStore):
        self.store = store

    def roles_of(self, principal_id: str) -> FrozenSet[str]:
        roles = frozenset(self.store.role_names_for_user(principal_id))
        logger.debug(f"Resolved roles for {principal_id}: {sorted(roles)}")
        return roles


class PermissionResolver:
    """Decides whether a principal's roles grant one permission.

    Effective permissions are the union over all held roles, and the
    superuser role short-circuits before any store access.
    """

    def __init__(self, store: RbacStore):
        self.store = store

    def has_permission(self, principal_id: str, role_names: AbstractSet[str], permission_name: str) -> bool:
        if SUPERUSER_ROLE in role_names:
            return True
        return self.store.user_has_permission(principal_id, str(permission_name))
