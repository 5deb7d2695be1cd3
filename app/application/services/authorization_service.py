"""Authorization: static role -> action matrix and ownership checks.

Actions are "resource:action" codes. The matrix is fixed per role; the role
itself is read fresh from the membership on every request, so nothing here
is cached. All functions are pure.
"""

from __future__ import annotations

from app.domain.enums import MemberRole
from app.domain.exceptions import AuthorizationException

_MEMBER_ACTIONS = frozenset(
    {
        "consultation:create",
        "consultation:view_own",
        "consultation:edit_own",
        "consultation:delete_own",
        "template:create",
        "member:view",
        "settings:view",
        "packages:view",
        "invoice:view",
    }
)

_ADMIN_ACTIONS = _MEMBER_ACTIONS | frozenset(
    {
        "consultation:view_all",
        "consultation:edit_all",
        "consultation:delete_all",
        "template:edit",
        "template:delete",
        "template:set_default",
        "member:invite",
        "member:remove",
        "settings:edit_branding",
        "settings:edit_profile",
        "settings:edit_form_options",
        "packages:create",
        "packages:edit",
        "packages:delete",
        "invoice:create",
        "invoice:edit",
        "invoice:send",
        "invoice:record_payment",
        "invoice:cancel",
        "invoice:create_payment_link",
        "stripe:view_status",
    }
)

_OWNER_ACTIONS = _ADMIN_ACTIONS | frozenset(
    {
        "member:change_role",
        "billing:view",
        "billing:manage",
        "data:export",
        "agency:delete",
        "agency:transfer",
        "invoice:delete",
        "stripe:connect",
        "stripe:disconnect",
    }
)

PERMISSIONS: dict[MemberRole, frozenset[str]] = {
    MemberRole.OWNER: _OWNER_ACTIONS,
    MemberRole.ADMIN: _ADMIN_ACTIONS,
    MemberRole.MEMBER: _MEMBER_ACTIONS,
}

ROLE_HIERARCHY: dict[MemberRole, int] = {
    MemberRole.OWNER: 100,
    MemberRole.ADMIN: 50,
    MemberRole.MEMBER: 10,
}


def allowed(role: MemberRole, action: str) -> bool:
    """Return True if role may perform action. Unknown actions are denied."""
    return action in PERMISSIONS.get(role, frozenset())


def require(role: MemberRole, action: str) -> None:
    """Raise AuthorizationException unless role may perform action."""
    if not allowed(role, action):
        raise AuthorizationException(action=action)


def has_minimum_role(role: MemberRole, minimum: MemberRole) -> bool:
    return ROLE_HIERARCHY.get(role, 0) >= ROLE_HIERARCHY[minimum]


def _can(role: MemberRole, resource: str, verb: str, owner_id: str | None, user_id: str) -> bool:
    if allowed(role, f"{resource}:{verb}_all"):
        return True
    return owner_id == user_id and allowed(role, f"{resource}:{verb}_own")


def can_access_resource(
    role: MemberRole, resource: str, owner_id: str | None, user_id: str
) -> bool:
    """View check: <resource>:view_all, or view_own when the caller owns it."""
    return _can(role, resource, "view", owner_id, user_id)


def can_modify_resource(
    role: MemberRole, resource: str, owner_id: str | None, user_id: str
) -> bool:
    return _can(role, resource, "edit", owner_id, user_id)


def can_delete_resource(
    role: MemberRole, resource: str, owner_id: str | None, user_id: str
) -> bool:
    return _can(role, resource, "delete", owner_id, user_id)
