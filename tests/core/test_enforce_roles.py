"""Role Gate - tests for role and ownership authorization."""

from uuid import uuid4

import pytest

from foodloop.core.domain_types import Action, Actor, UserId, UserRole
from foodloop.core.enforce_roles import (
    ALLOWED_ROLES, is_allowed, require_owner, require_role,
)
from foodloop.core.errors import PermissionDeniedError


def _actor(role: UserRole) -> Actor:
    return Actor(user_id=UserId(uuid4()), role=role)


@pytest.mark.parametrize("action,allowed", [
    (Action.CREATE_LISTING, {UserRole.FOOD_DONOR, UserRole.ADMIN}),
    (Action.SUBMIT_REQUEST, {UserRole.RECIPIENT_ORG, UserRole.ADMIN}),
    (Action.COMPLETE_REQUEST, {UserRole.RECIPIENT_ORG, UserRole.ADMIN}),
    (Action.APPROVE_REQUEST, {UserRole.FOOD_DONOR, UserRole.ADMIN}),
    (Action.REJECT_REQUEST, {UserRole.FOOD_DONOR, UserRole.ADMIN}),
    (Action.GENERATE_REPORT, {UserRole.DATA_ANALYST, UserRole.ADMIN}),
])
def test_allowed_roles_per_action(action, allowed):
    assert set(ALLOWED_ROLES[action]) == allowed
    for role in UserRole:
        assert is_allowed(role, action) == (role in allowed)


def test_every_action_is_gated():
    assert set(ALLOWED_ROLES) == set(Action)


def test_admin_passes_every_gate():
    admin = _actor(UserRole.ADMIN)
    for action in Action:
        require_role(admin, action)


def test_recipient_cannot_create_listing():
    with pytest.raises(PermissionDeniedError) as exc:
        require_role(_actor(UserRole.RECIPIENT_ORG), Action.CREATE_LISTING)
    assert exc.value.http_status == 403
    assert exc.value.context.actor_role == "recipient_org"


def test_donor_cannot_generate_report():
    with pytest.raises(PermissionDeniedError):
        require_role(_actor(UserRole.FOOD_DONOR), Action.GENERATE_REPORT)


def test_owner_check_passes_for_owner():
    donor = _actor(UserRole.FOOD_DONOR)
    require_owner(donor, donor.user_id, Action.APPROVE_REQUEST)
    require_owner(donor, str(donor.user_id), Action.APPROVE_REQUEST)


def test_owner_check_rejects_other_users():
    with pytest.raises(PermissionDeniedError):
        require_owner(_actor(UserRole.FOOD_DONOR), uuid4(), Action.APPROVE_REQUEST)


def test_admin_bypasses_ownership():
    require_owner(_actor(UserRole.ADMIN), uuid4(), Action.COMPLETE_REQUEST)
