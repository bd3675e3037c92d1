"""
Authorization policy tests.
Pure decision functions over actor role and target role, no HTTP involved.
"""
import pytest

from models.schemas import Actor
from services import policy

ROLES = ["customer", "sub_admin", "admin", "super_admin"]


def actor(role, actor_id="actor-1"):
    return Actor(id=actor_id, email=f"{role}@example.com", role=role)


class TestViewAndEdit:
    @pytest.mark.parametrize("target", ROLES)
    def test_admins_view_everyone(self, target):
        assert policy.can_view(actor("admin"), target)
        assert policy.can_view(actor("super_admin"), target)

    def test_sub_admin_views_customers_only(self):
        sub = actor("sub_admin")
        assert policy.can_view(sub, "customer")
        for target in ("sub_admin", "admin", "super_admin"):
            assert not policy.can_view(sub, target), f"sub_admin should not view {target}"

    @pytest.mark.parametrize("target", ROLES)
    def test_customer_views_nothing(self, target):
        assert not policy.can_view(actor("customer"), target)

    def test_only_super_admin_edits_super_admin(self):
        assert policy.can_edit(actor("super_admin"), "super_admin")
        assert not policy.can_edit(actor("admin"), "super_admin")
        assert policy.can_edit(actor("admin"), "admin")

    def test_unknown_roles_have_no_privileges(self):
        ghost = actor("captain")
        assert not policy.can_view(ghost, "customer")
        assert not policy.can_edit(ghost, "customer")
        assert not policy.can_create_users(ghost)
        assert not policy.can_assign_role(ghost, "sub_admin")
        assert policy.role_rank("captain") == -1

    def test_missing_actor_is_denied(self):
        assert not policy.can_view(None, "customer")
        assert not policy.can_assign_role(None, "customer")
        assert not policy.can_manage_admins(None)


class TestRoleChanges:
    def test_only_super_admin_changes_roles(self):
        assert policy.can_change_role(actor("super_admin"))
        assert not policy.can_change_role(actor("admin"))

    def test_assignable_roles(self):
        admin = actor("admin")
        sub = actor("sub_admin")
        sup = actor("super_admin")
        assert policy.can_assign_role(admin, "customer")
        assert policy.can_assign_role(admin, "sub_admin")
        assert not policy.can_assign_role(admin, "admin")
        assert not policy.can_assign_role(admin, "super_admin")
        assert policy.can_assign_role(sub, "sub_admin")
        assert not policy.can_assign_role(actor("customer"), "sub_admin")
        assert policy.can_assign_role(sup, "super_admin")

    def test_create_users_requires_admin(self):
        assert policy.can_create_users(actor("admin"))
        assert policy.can_create_users(actor("super_admin"))
        assert not policy.can_create_users(actor("sub_admin"))


class TestDeleteAndStatus:
    def test_nobody_deletes_themselves(self):
        sup = actor("super_admin", "same")
        assert not policy.can_delete(sup, "super_admin", "same")
        assert policy.can_delete(sup, "super_admin", "other")

    def test_admin_cannot_delete_super_admin(self):
        assert not policy.can_delete(actor("admin"), "super_admin", "other")

    def test_super_admin_is_never_suspended(self):
        assert not policy.can_set_user_status(actor("super_admin"), "super_admin", "suspend", "other")
        assert policy.can_set_user_status(actor("super_admin"), "super_admin", "activate", "other")

    def test_cannot_suspend_self(self):
        assert not policy.can_set_user_status(actor("admin", "me"), "admin", "suspend", "me")
        assert policy.can_set_user_status(actor("admin", "me"), "customer", "suspend", "you")

    def test_manage_admins(self):
        sup = actor("super_admin", "me")
        assert policy.can_manage_admins(sup)
        assert policy.can_manage_admins(sup, "you")
        assert not policy.can_manage_admins(sup, "me")
        assert not policy.can_manage_admins(actor("admin"), "you")
