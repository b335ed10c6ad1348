"""
Access decisions: admin-tier gate and per-permission gate
"""

import logging
from typing import AbstractSet

from access_control.config.roles_config import ADMIN_ROLES
from access_control.core.exceptions import ForbiddenMissingPermissionError, ForbiddenNotAdminError
from access_control.core.permissions import PermissionName
from access_control.core.resolvers import PermissionResolver, RoleResolver
from access_control.core.store import RbacStore

logger = logging.getLogger(__name__)


class AccessDecisionEngine:
    def __init__(self, role_resolver: RoleResolver, permission_resolver: PermissionResolver):
        self.role_resolver = role_resolver
        self.permission_resolver = permission_resolver

    @classmethod
    def from_store(cls, store: RbacStore) -> "AccessDecisionEngine":
        return cls(RoleResolver(store), PermissionResolver(store))

    @staticmethod
    def is_admin(role_names: AbstractSet[str]) -> bool:
        """True if any held role is in the admin role set"""
        return not ADMIN_ROLES.isdisjoint(role_names)

    def can(self, principal_id: str, role_names: AbstractSet[str], permission: PermissionName) -> bool:
        """True if the roles grant the permission; the superuser role always does"""
        return self.permission_resolver.has_permission(principal_id, role_names, permission)

    def decide_admin(self, principal_id: str, role_names: AbstractSet[str]) -> None:
        """Raise ForbiddenNotAdminError unless the roles include an admin role"""
        if not self.is_admin(role_names):
            logger.warning(f"Admin access denied for {principal_id} with roles {sorted(role_names)}")
            raise ForbiddenNotAdminError()
        logger.debug(f"Admin access allowed for {principal_id}")

    def decide_permission(self, principal_id: str, role_names: AbstractSet[str], permission: PermissionName) -> None:
        """Raise ForbiddenMissingPermissionError unless the roles grant the permission"""
        if not self.can(principal_id, role_names, permission):
            logger.warning(f"Permission '{permission}' denied for {principal_id}")
            raise ForbiddenMissingPermissionError(str(permission))
        logger.debug(f"Permission '{permission}' allowed for {principal_id}")
