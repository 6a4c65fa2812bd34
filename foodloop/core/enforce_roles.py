"""Role Gate - authorizes actions by checking the caller's role and ownership.

Invariants:
    - ALLOWED_ROLES is the single source of truth for role-gated actions
    - Admin passes every role and ownership check
    - Checks raise PermissionDeniedError; they never return a falsy verdict

Design Decisions:
    - Identity arrives as an explicit Actor argument (no ambient current-user)
    - Ownership checks live next to role checks: both are authorization, and
      services call them before touching the store
"""

from uuid import UUID

from foodloop.core.domain_types import Action, Actor, UserRole
from foodloop.core.errors import PermissionDeniedError


ALLOWED_ROLES: dict[Action, frozenset[UserRole]] = {
    Action.CREATE_LISTING: frozenset({UserRole.FOOD_DONOR, UserRole.ADMIN}),
    Action.EXPIRE_LISTING: frozenset({UserRole.FOOD_DONOR, UserRole.ADMIN}),
    Action.SUBMIT_REQUEST: frozenset({UserRole.RECIPIENT_ORG, UserRole.ADMIN}),
    Action.COMPLETE_REQUEST: frozenset({UserRole.RECIPIENT_ORG, UserRole.ADMIN}),
    Action.APPROVE_REQUEST: frozenset({UserRole.FOOD_DONOR, UserRole.ADMIN}),
    Action.REJECT_REQUEST: frozenset({UserRole.FOOD_DONOR, UserRole.ADMIN}),
    Action.GENERATE_REPORT: frozenset({UserRole.DATA_ANALYST, UserRole.ADMIN}),
}


def is_allowed(role: UserRole, action: Action) -> bool:
    return role in ALLOWED_ROLES[action]


def require_role(actor: Actor, action: Action) -> None:
    """Raise PermissionDeniedError unless actor.role may perform action."""
    if not is_allowed(actor.role, action):
        raise PermissionDeniedError(actor.role.value, action.value)


def require_owner(actor: Actor, owner_id: UUID | str, action: Action) -> None:
    """Raise PermissionDeniedError unless actor owns the record (or is admin)."""
    if actor.is_admin:
        return
    if str(actor.user_id) != str(owner_id):
        raise PermissionDeniedError(
            actor.role.value, f"{action.value} on a record owned by another user",
        )
