from access_control.core.decisions import AccessDecisionEngine
from access_control.core.store import RbacStore
from access_control.modules.cms.schemas import AccessCheckResponse, RoleSummary
from typing import List


class CmsAccessService:
    """Query surface used by clients to gate admin UI rendering"""

    def __init__(self, store: RbacStore):
        self.store = store
        self.engine = AccessDecisionEngine.from_store(store)

    def check_access(self, principal_id: str) -> AccessCheckResponse:
        """Return whether the principal holds an admin role, along with all of its roles"""
        role_names = self.engine.role_resolver.roles_of(principal_id)
        return AccessCheckResponse(
            is_admin=self.engine.is_admin(role_names),
            roles=sorted(role_names),
        )

    def list_roles(self) -> List[RoleSummary]:
        return [RoleSummary(**role) for role in self.store.list_roles()]
