"""Tests for the role -> action matrix and ownership checks."""

import pytest

from app.application.services.authorization_service import (
    PERMISSIONS,
    allowed,
    can_access_resource,
    can_delete_resource,
    can_modify_resource,
    has_minimum_role,
    require,
)
from app.domain.enums import MemberRole
from app.domain.exceptions import AuthorizationException


def test_roles_are_strictly_nested() -> None:
    """Every member action is an admin action, every admin action an owner action."""
    assert PERMISSIONS[MemberRole.MEMBER] < PERMISSIONS[MemberRole.ADMIN]
    assert PERMISSIONS[MemberRole.ADMIN] < PERMISSIONS[MemberRole.OWNER]


@pytest.mark.parametrize(
    ("role", "action", "expected"),
    [
        (MemberRole.MEMBER, "consultation:create", True),
        (MemberRole.MEMBER, "consultation:view_all", False),
        (MemberRole.MEMBER, "packages:view", True),
        (MemberRole.MEMBER, "packages:create", False),
        (MemberRole.ADMIN, "packages:create", True),
        (MemberRole.ADMIN, "invoice:create_payment_link", True),
        (MemberRole.ADMIN, "invoice:delete", False),
        (MemberRole.ADMIN, "data:export", False),
        (MemberRole.ADMIN, "agency:delete", False),
        (MemberRole.OWNER, "agency:delete", True),
        (MemberRole.OWNER, "stripe:disconnect", True),
        (MemberRole.OWNER, "unknown:action", False),
    ],
)
def test_allowed(role: MemberRole, action: str, expected: bool) -> None:
    assert allowed(role, action) is expected


def test_require_raises_with_action() -> None:
    require(MemberRole.OWNER, "data:export")
    with pytest.raises(AuthorizationException) as exc_info:
        require(MemberRole.MEMBER, "data:export")
    assert exc_info.value.details == {"action": "data:export"}


def test_has_minimum_role() -> None:
    assert has_minimum_role(MemberRole.OWNER, MemberRole.ADMIN)
    assert has_minimum_role(MemberRole.ADMIN, MemberRole.ADMIN)
    assert not has_minimum_role(MemberRole.MEMBER, MemberRole.ADMIN)


def test_member_only_reaches_own_consultations() -> None:
    assert can_access_resource(MemberRole.MEMBER, "consultation", "u1", "u1")
    assert not can_access_resource(MemberRole.MEMBER, "consultation", "u2", "u1")
    assert can_modify_resource(MemberRole.MEMBER, "consultation", "u1", "u1")
    assert not can_modify_resource(MemberRole.MEMBER, "consultation", "u2", "u1")
    assert can_delete_resource(MemberRole.MEMBER, "consultation", "u1", "u1")
    assert not can_delete_resource(MemberRole.MEMBER, "consultation", "u2", "u1")


def test_admin_reaches_every_consultation() -> None:
    assert can_access_resource(MemberRole.ADMIN, "consultation", "u2", "u1")
    assert can_modify_resource(MemberRole.ADMIN, "consultation", "u2", "u1")
    assert can_delete_resource(MemberRole.ADMIN, "consultation", None, "u1")
