"""
Guard composition.

A guard is an ordered tuple of steps. Each step takes a GuardContext and
returns a (possibly enriched) GuardContext or raises an AccessControlError;
the first raise stops evaluation, so later steps and the protected action
never run.

    guard = permission_guard(sessions, engine, PermissionName("cms.pages.create"))
    result = guard.run(token, lambda ctx: create_page(ctx.principal, ...))

States, in order: Unauthenticated (no principal, raises), AuthenticatedPending
(principal known, roles resolved once on first need), Decided (allow runs the
action, deny raises a Forbidden error).
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, FrozenSet, Optional, Tuple, TypeVar

from access_control.core.decisions import AccessDecisionEngine
from access_control.core.exceptions import UnauthenticatedError
from access_control.core.permissions import PermissionName
from access_control.modules.auth.schemas import Principal
from access_control.modules.auth.service import SessionResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GuardContext:
    credentials: Optional[str] = None
    principal: Optional[Principal] = None
    roles: Optional[FrozenSet[str]] = None

    @property
    def principal_id(self) -> str:
        if self.principal is None:
            raise UnauthenticatedError()
        return self.principal.id


Step = Callable[[GuardContext], GuardContext]


class Guard:
    def __init__(self, steps: Tuple[Step, ...] = ()):
        self._steps = tuple(steps)

    @property
    def steps(self) -> Tuple[Step, ...]:
        return self._steps

    def then(self, step: Step) -> "Guard":
        return Guard(self._steps + (step,))

    def evaluate(self, credentials: Optional[str]) -> GuardContext:
        ctx = GuardContext(credentials=credentials)
        for step in self._steps:
            ctx = step(ctx)
        return ctx

    def run(self, credentials: Optional[str], action: Callable[[GuardContext], T]) -> T:
        """Evaluate every step, then hand the final context to the action"""
        return action(self.evaluate(credentials))


def authenticate(sessions: SessionResolver) -> Step:
    def step(ctx: GuardContext) -> GuardContext:
        principal = sessions.get_session(ctx.credentials)
        if principal is None:
            logger.info("Rejected request without a valid session")
            raise UnauthenticatedError()
        return replace(ctx, principal=principal)
    return step


def resolve_roles(engine: AccessDecisionEngine) -> Step:
    def step(ctx: GuardContext) -> GuardContext:
        if ctx.roles is not None:
            return ctx
        return replace(ctx, roles=engine.role_resolver.roles_of(ctx.principal_id))
    return step


def require_admin_role(engine: AccessDecisionEngine) -> Step:
    load = resolve_roles(engine)

    def step(ctx: GuardContext) -> GuardContext:
        ctx = load(ctx)
        engine.decide_admin(ctx.principal_id, ctx.roles)
        return ctx
    return step


def require_granted(engine: AccessDecisionEngine, permission: PermissionName) -> Step:
    permission = PermissionName(permission)
    load = resolve_roles(engine)

    def step(ctx: GuardContext) -> GuardContext:
        ctx = load(ctx)
        engine.decide_permission(ctx.principal_id, ctx.roles, permission)
        return ctx
    return step


def authenticated_guard(sessions: SessionResolver) -> Guard:
    return Guard((authenticate(sessions),))


def admin_guard(sessions: SessionResolver, engine: AccessDecisionEngine) -> Guard:
    return authenticated_guard(sessions).then(require_admin_role(engine))


def permission_guard(sessions: SessionResolver, engine: AccessDecisionEngine, permission: PermissionName) -> Guard:
    """Admin gate first, then the specific permission"""
    return admin_guard(sessions, engine).then(require_granted(engine, permission))
