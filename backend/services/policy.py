"""
Authorization policy for Fixing Maritime backend.

Pure decision functions over the acting user's role and the target's role.
Every function answers for every (actor, target) pair; a role outside the
hierarchy carries no privileges.

Role hierarchy: super_admin > admin > sub_admin > customer.
"""
from typing import Optional

from models.enums import UserRole, UserStatusAction
from models.schemas import Actor

ROLE_RANK = {
    UserRole.customer.value: 0,
    UserRole.sub_admin.value: 1,
    UserRole.admin.value: 2,
    UserRole.super_admin.value: 3,
}

# Roles accepted on the admin login track
ADMIN_LOGIN_ROLES = (UserRole.admin.value, UserRole.super_admin.value)


def role_rank(role: Optional[str]) -> int:
    return ROLE_RANK.get(_role_value(role), -1)


def _role_value(role) -> Optional[str]:
    return role.value if isinstance(role, UserRole) else role


def _is(actor: Optional[Actor], *roles: UserRole) -> bool:
    return actor is not None and actor.role in [r.value for r in roles]


def is_admin_actor(actor: Optional[Actor]) -> bool:
    return _is(actor, UserRole.admin, UserRole.super_admin)


def can_view(actor: Optional[Actor], target_role) -> bool:
    """super_admin and admin see everyone; sub_admin sees customers only."""
    if is_admin_actor(actor):
        return True
    if _is(actor, UserRole.sub_admin):
        return _role_value(target_role) == UserRole.customer.value
    return False


def can_edit(actor: Optional[Actor], target_role) -> bool:
    if not can_view(actor, target_role):
        return False
    if _role_value(target_role) == UserRole.super_admin.value:
        return _is(actor, UserRole.super_admin)
    return True


def can_change_role(actor: Optional[Actor]) -> bool:
    return _is(actor, UserRole.super_admin)


def can_delete(actor: Optional[Actor], target_role, target_id: Optional[str] = None) -> bool:
    """Role check only; dependent-record conflicts are raised by the user manager."""
    if actor is not None and target_id is not None and actor.id == target_id:
        return False
    return can_edit(actor, target_role)


def can_create_users(actor: Optional[Actor]) -> bool:
    return is_admin_actor(actor)


def can_assign_role(actor: Optional[Actor], role) -> bool:
    """Which roles an actor may hand out when creating a user."""
    role = _role_value(role)
    if role == UserRole.customer.value:
        return actor is not None
    if role == UserRole.sub_admin.value:
        return actor is not None and role_rank(actor.role) >= ROLE_RANK[UserRole.sub_admin.value]
    if role in (UserRole.admin.value, UserRole.super_admin.value):
        return _is(actor, UserRole.super_admin)
    return False


def can_approve_users(actor: Optional[Actor]) -> bool:
    return is_admin_actor(actor)


def can_set_user_status(
    actor: Optional[Actor], target_role, action, target_id: Optional[str] = None
) -> bool:
    """Activate/suspend decision: super_admins and the actor themself are never suspended."""
    if not can_approve_users(actor) or not can_edit(actor, target_role):
        return False
    if _role_value(action) == UserStatusAction.suspend.value:
        if _role_value(target_role) == UserRole.super_admin.value:
            return False
        if target_id is not None and actor.id == target_id:
            return False
    return True


def can_manage_admins(actor: Optional[Actor], target_id: Optional[str] = None) -> bool:
    """Promote/demote admin roles; nobody may strip their own privileges."""
    if not _is(actor, UserRole.super_admin):
        return False
    return target_id is None or actor.id != target_id
