"""
Dashboard Statistics and Health Tests
"""
from fastapi.testclient import TestClient

from database import MemoryStore
from main import app


class TestHealth:
    def test_health_reports_demo_store(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "demo"

    def test_root(self, client):
        assert client.get("/").json()["message"] == "Fixing Maritime API"


class TestUnavailableStore:
    def test_store_backed_routes_return_503(self, as_admin):
        class DownStore(MemoryStore):
            demo = False
            available = False

            async def ping(self):
                return False

        app.state.store = DownStore()
        try:
            with TestClient(app) as client:
                response = client.get("/api/admin/users", headers=as_admin)
                assert response.status_code == 503
                assert response.json()["detail"] == "Database not available"

                content = client.get("/api/content")
                assert content.status_code == 200
        finally:
            app.state.store = None


class TestDashboardStats:
    def test_counts_and_revenue(self, client, customer, as_admin):
        client.post("/api/quote-requests", json={
            "name": "Ada", "email": "ada@example.com", "service_id": "haulage",
            "service_name": "Haulage", "project_description": "Kano run",
        })
        order = client.post(
            "/api/admin/orders",
            json={"customer_email": customer["email"], "service_name": "Haulage", "amount": 500},
            headers=as_admin,
        ).json()["order"]
        client.post(f"/api/admin/orders/{order['id']}/mark-paid", headers=as_admin)

        response = client.get("/api/admin/stats", headers=as_admin)
        assert response.status_code == 200
        stats = response.json()

        assert stats["users"]["by_role"]["customer"] == 1
        assert stats["users"]["by_role"]["admin"] == 1
        assert stats["quote_requests"]["by_status"]["pending"] == 1
        assert stats["orders"]["total"] == 1
        assert stats["revenue"]["orders_paid"] == 500
        assert stats["recent_quotes"][0]["service_name"] == "Haulage"

    def test_requires_admin(self, client):
        assert client.get("/api/admin/stats").status_code == 401


class TestUnhandledErrors:
    def test_unexpected_error_returns_generic_500(self, as_admin):
        class BrokenStore(MemoryStore):
            async def find(self, collection, query=None, sort=None, skip=0, limit=0):
                raise RuntimeError("cursor exploded")

        app.state.store = BrokenStore()
        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                response = client.get("/api/admin/users", headers=as_admin)
                assert response.status_code == 500
                assert response.json() == {"detail": "Internal server error"}
        finally:
            app.state.store = None
