"""
Admin User Management Tests
Role-filtered listing, CRUD, activation/suspension and admin promotion.
"""
import asyncio

import pytest

from errors import AuthorizationError
from models.schemas import Actor, Order, UserUpdate
from services import user_service


def _give_order(store, user):
    order = Order(
        order_number="ORD-2026-999999",
        tracking_number="TRK-FX-26999999",
        user_id=user["id"],
        customer_email=user["email"],
        service_name="Warehousing",
        amount=250.0,
        currency="NGN",
        payment_status="paid",
    )
    asyncio.run(store.insert_one("orders", order.model_dump()))


class TestListUsers:
    def test_admin_sees_all_roles_with_stats(self, client, store, super_admin, customer, as_admin):
        _give_order(store, customer)
        response = client.get("/api/admin/users", headers=as_admin)
        assert response.status_code == 200

        users = {u["email"]: u for u in response.json()["users"]}
        assert super_admin["email"] in users
        assert users[customer["email"]]["order_count"] == 1
        assert users[customer["email"]]["total_spent"] == 250.0
        assert all("password_hash" not in u for u in users.values())

    def test_filter_by_role(self, client, customer, admin, as_admin):
        response = client.get("/api/admin/users", params={"role": "customer"}, headers=as_admin)
        assert [u["role"] for u in response.json()["users"]] == ["customer"]

    def test_requires_admin_cookie(self, client):
        assert client.get("/api/admin/users").status_code == 401

    def test_get_unknown_user(self, client, as_admin):
        assert client.get("/api/admin/users/missing", headers=as_admin).status_code == 404


class TestCreateUser:
    NEW_USER = {"name": "New Hire", "email": "hire@fixingmaritime.com", "password": "welcome-aboard"}

    def test_admin_creates_customer(self, client, as_admin):
        response = client.post("/api/admin/users", json=self.NEW_USER, headers=as_admin)
        assert response.status_code == 201, response.text
        assert response.json()["user"]["role"] == "customer"

    def test_admin_cannot_create_admin(self, client, as_admin):
        response = client.post("/api/admin/users", json={**self.NEW_USER, "role": "admin"}, headers=as_admin)
        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient permissions to create user with this role"

    def test_super_admin_creates_admin(self, client, as_super):
        response = client.post("/api/admin/users", json={**self.NEW_USER, "role": "admin"}, headers=as_super)
        assert response.status_code == 201

    def test_duplicate_email(self, client, customer, as_admin):
        response = client.post(
            "/api/admin/users", json={**self.NEW_USER, "email": customer["email"]}, headers=as_admin
        )
        assert response.status_code == 409

    def test_unknown_role_rejected(self, client, as_super):
        response = client.post("/api/admin/users", json={**self.NEW_USER, "role": "captain"}, headers=as_super)
        assert response.status_code == 400


class TestUpdateUser:
    def test_admin_edits_customer(self, client, customer, as_admin):
        response = client.put(
            f"/api/admin/users/{customer['id']}", json={"company": "Blue Water"}, headers=as_admin
        )
        assert response.status_code == 200
        assert response.json()["user"]["company"] == "Blue Water"

    def test_admin_cannot_edit_super_admin(self, client, super_admin, as_admin):
        response = client.put(
            f"/api/admin/users/{super_admin['id']}", json={"name": "Hacked"}, headers=as_admin
        )
        assert response.status_code == 403

    def test_only_super_admin_changes_roles(self, client, customer, as_admin, as_super):
        denied = client.put(f"/api/admin/users/{customer['id']}", json={"role": "sub_admin"}, headers=as_admin)
        assert denied.status_code == 403
        assert denied.json()["detail"] == "Only super admins can change user roles"

        allowed = client.put(f"/api/admin/users/{customer['id']}", json={"role": "sub_admin"}, headers=as_super)
        assert allowed.status_code == 200
        assert allowed.json()["user"]["role"] == "sub_admin"

    def test_cannot_change_own_role(self, client, super_admin, as_super):
        response = client.put(
            f"/api/admin/users/{super_admin['id']}", json={"role": "admin"}, headers=as_super
        )
        assert response.status_code == 403

    def test_email_conflict(self, client, customer, admin, as_super):
        response = client.put(
            f"/api/admin/users/{customer['id']}", json={"email": admin["email"]}, headers=as_super
        )
        assert response.status_code == 409

    def test_cannot_deactivate_super_admin_through_edit(self, client, make_user, as_super, as_admin):
        other = make_user("super_admin", email="second-root@fixingmaritime.com")
        url = f"/api/admin/users/{other['id']}"

        response = client.put(url, json={"email_verified": False}, headers=as_super)
        assert response.status_code == 403, f"Expected 403, got {response.status_code}: {response.text}"
        detail = client.get(url, headers=as_admin).json()["user"]
        assert detail["email_verified"] is True

    def test_sub_admin_cannot_toggle_activation(self, store, customer, make_user):
        sub_admin = make_user("sub_admin")
        actor = Actor(id=sub_admin["id"], email=sub_admin["email"], role="sub_admin")
        with pytest.raises(AuthorizationError):
            asyncio.run(user_service.update_user(
                store, actor, customer["id"], UserUpdate(email_verified=False)
            ))

    def test_edit_deactivates_customer(self, client, customer, as_admin):
        response = client.put(
            f"/api/admin/users/{customer['id']}", json={"email_verified": False}, headers=as_admin
        )
        assert response.status_code == 200
        assert response.json()["user"]["email_verified"] is False


class TestDeleteUser:
    def test_delete_customer(self, client, customer, as_admin):
        response = client.delete(f"/api/admin/users/{customer['id']}", headers=as_admin)
        assert response.status_code == 200
        assert client.get(f"/api/admin/users/{customer['id']}", headers=as_admin).status_code == 404

    def test_user_with_orders_is_kept(self, client, store, customer, as_super):
        _give_order(store, customer)
        response = client.delete(f"/api/admin/users/{customer['id']}", headers=as_super)
        assert response.status_code == 409
        assert "Consider deactivating instead" in response.json()["detail"]

    def test_cannot_delete_self(self, client, super_admin, as_super):
        assert client.delete(f"/api/admin/users/{super_admin['id']}", headers=as_super).status_code == 403

    def test_admin_cannot_delete_super_admin(self, client, super_admin, as_admin):
        assert client.delete(f"/api/admin/users/{super_admin['id']}", headers=as_admin).status_code == 403


class TestUserStatus:
    def test_suspend_and_activate(self, client, customer, as_admin):
        suspended = client.post(
            f"/api/admin/users/{customer['id']}/status", json={"action": "suspend"}, headers=as_admin
        )
        assert suspended.status_code == 200
        assert suspended.json()["user"]["status"] == "inactive"
        assert suspended.json()["message"] == "User suspended successfully"

        activated = client.post(
            f"/api/admin/users/{customer['id']}/status", json={"action": "activate"}, headers=as_admin
        )
        assert activated.json()["user"]["email_verified"] is True

    def test_invalid_action(self, client, customer, as_admin):
        response = client.post(
            f"/api/admin/users/{customer['id']}/status", json={"action": "ban"}, headers=as_admin
        )
        assert response.status_code == 400

    def test_super_admin_cannot_be_suspended(self, client, make_user, as_super):
        other_super = make_user("super_admin")
        response = client.post(
            f"/api/admin/users/{other_super['id']}/status", json={"action": "suspend"}, headers=as_super
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Cannot suspend super admin users"

    def test_cannot_suspend_self(self, client, admin, as_admin):
        response = client.post(
            f"/api/admin/users/{admin['id']}/status", json={"action": "suspend"}, headers=as_admin
        )
        assert response.status_code == 403


class TestAdminRoles:
    def test_list_admins(self, client, admin, customer, super_admin, as_super):
        response = client.get("/api/admin/users/admins", headers=as_super)
        assert response.status_code == 200
        roles = {a["role"] for a in response.json()["admins"]}
        assert roles <= {"sub_admin", "admin", "super_admin"}
        assert "customer" not in roles

    def test_create_admin_requires_super_admin(self, client, as_admin, as_super):
        payload = {"name": "Deck Officer", "email": "deck@fixingmaritime.com", "password": "anchor-down"}
        assert client.post("/api/admin/users/create-admin", json=payload, headers=as_admin).status_code == 403

        created = client.post("/api/admin/users/create-admin", json=payload, headers=as_super)
        assert created.status_code == 201
        assert created.json()["user"]["role"] == "admin"
        assert created.json()["user"]["status"] == "active"

    def test_create_admin_with_customer_role(self, client, as_super):
        payload = {"name": "X", "email": "x@fixingmaritime.com", "password": "anchor-down", "role": "customer"}
        assert client.post("/api/admin/users/create-admin", json=payload, headers=as_super).status_code == 400

    def test_remove_admin(self, client, admin, as_super):
        response = client.post("/api/admin/users/remove-admin", json={"user_id": admin["id"]}, headers=as_super)
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "customer"

    def test_remove_admin_from_customer(self, client, customer, as_super):
        response = client.post(
            "/api/admin/users/remove-admin", json={"user_id": customer["id"]}, headers=as_super
        )
        assert response.status_code == 400

    def test_cannot_remove_own_privileges(self, client, super_admin, as_super):
        response = client.post(
            "/api/admin/users/remove-admin", json={"user_id": super_admin["id"]}, headers=as_super
        )
        assert response.status_code == 403

    def test_cannot_demote_super_admin(self, client, make_user, as_super):
        other_super = make_user("super_admin")
        response = client.post(
            "/api/admin/users/remove-admin", json={"user_id": other_super["id"]}, headers=as_super
        )
        assert response.status_code == 403
