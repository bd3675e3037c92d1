"""
Order and Tracking Tests
Order creation, numbering, tracking events, payment and public lookup.
"""
import re
from datetime import datetime, timezone

import pytest

YEAR = datetime.now(timezone.utc).year

ORDER = {
    "customer_email": "buyer@example.com",
    "customer_name": "Buyer",
    "service_name": "Freight Forwarding",
    "amount": 1500,
}

PENDING_QUOTE = {
    "name": "Ada Obi",
    "email": "ada@example.com",
    "service_id": "haulage",
    "service_name": "Haulage",
    "project_description": "Move a flatbed load to Kano",
}


@pytest.fixture
def order(client, as_admin):
    response = client.post("/api/admin/orders", json=ORDER, headers=as_admin)
    assert response.status_code == 201, f"Expected 201, got {response.status_code}: {response.text}"
    return response.json()["order"]


def _track(client, headers, order_id, status, title="Update"):
    return client.post(
        f"/api/admin/orders/{order_id}/tracking",
        json={"status": status, "title": title, "description": f"{title} for shipment", "location": "Apapa"},
        headers=headers,
    )


class TestCreateOrder:
    def test_numbers_follow_formats(self, order):
        assert re.fullmatch(rf"ORD-{YEAR}-\d{{6}}", order["order_number"])
        assert re.fullmatch(rf"TRK-FX-{str(YEAR)[-2:]}\d{{6}}", order["tracking_number"])
        assert order["order_number"].endswith("000001")

    def test_numbers_are_sequential(self, client, as_admin, order):
        second = client.post("/api/admin/orders", json=ORDER, headers=as_admin).json()["order"]
        assert second["order_number"].endswith("000002")
        assert second["tracking_number"] != order["tracking_number"]

    def test_defaults(self, order):
        assert order["status"] == "pending"
        assert order["payment_status"] == "unpaid"
        assert order["currency"] == "NGN"

    def test_placed_event_is_recorded(self, client, as_admin, order):
        detail = client.get(f"/api/admin/orders/{order['id']}", headers=as_admin).json()["order"]
        assert [e["status"] for e in detail["tracking_history"]] == ["order_placed"]

    def test_requires_user_or_email(self, client, as_admin):
        payload = {"service_name": "Haulage", "amount": 10}
        response = client.post("/api/admin/orders", json=payload, headers=as_admin)
        assert response.status_code == 400
        assert response.json()["detail"] == "Either user_id or customer_email is required"

    def test_user_details_are_copied(self, client, customer, as_admin):
        payload = {"user_id": customer["id"], "service_name": "Haulage", "amount": 10}
        order = client.post("/api/admin/orders", json=payload, headers=as_admin).json()["order"]
        assert order["customer_email"] == customer["email"]
        assert order["customer_name"] == customer["name"]

    def test_unknown_user(self, client, as_admin):
        payload = {"user_id": "nobody", "service_name": "Haulage", "amount": 10}
        assert client.post("/api/admin/orders", json=payload, headers=as_admin).status_code == 404

    def test_negative_amount(self, client, as_admin):
        response = client.post("/api/admin/orders", json={**ORDER, "amount": -5}, headers=as_admin)
        assert response.status_code == 400


class TestOrderFromQuote:
    def test_order_carries_quote_terms(self, client, as_admin, accepted_quote):
        response = client.post(
            "/api/admin/orders/from-quote",
            json={"quote_request_id": accepted_quote["id"]},
            headers=as_admin,
        )
        assert response.status_code == 201
        order = response.json()["order"]
        assert order["amount"] == 1000
        assert order["currency"] == "USD"
        assert order["quote_request_id"] == accepted_quote["id"]
        assert order["customer_email"] == "ada@example.com"

    def test_one_order_per_quote(self, client, as_admin, accepted_quote):
        payload = {"quote_request_id": accepted_quote["id"]}
        client.post("/api/admin/orders/from-quote", json=payload, headers=as_admin)
        again = client.post("/api/admin/orders/from-quote", json=payload, headers=as_admin)
        assert again.status_code == 409

    def test_quote_must_be_accepted(self, client, as_admin):
        quote = client.post("/api/quote-requests", json=PENDING_QUOTE).json()["quote_request"]
        response = client.post(
            "/api/admin/orders/from-quote", json={"quote_request_id": quote["id"]}, headers=as_admin
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Quote must be accepted first"


class TestTracking:
    def test_events_move_the_order(self, client, as_admin, order):
        response = _track(client, as_admin, order["id"], "processing", "Processing")
        assert response.status_code == 201
        assert response.json()["order"]["status"] == "processing"

        response = _track(client, as_admin, order["id"], "dispatched", "Dispatched")
        assert response.json()["order"]["status"] == "in_transit"

        response = _track(client, as_admin, order["id"], "out_for_delivery", "Out For Delivery")
        data = response.json()
        assert data["order"]["status"] == "in_transit"
        assert len(data["order"]["tracking_history"]) == 4

    def test_cannot_skip_to_delivered(self, client, as_admin, order):
        response = _track(client, as_admin, order["id"], "delivered")
        assert response.status_code == 409

        history = client.get(f"/api/admin/orders/{order['id']}/tracking", headers=as_admin).json()
        assert len(history["tracking_history"]) == 1

    def test_cancelled_order_is_final(self, client, as_admin, order):
        assert _track(client, as_admin, order["id"], "cancelled").status_code == 201
        assert _track(client, as_admin, order["id"], "processing").status_code == 409

    def test_unknown_tracking_status(self, client, as_admin, order):
        response = _track(client, as_admin, order["id"], "lost_at_sea")
        assert response.status_code == 400

    def test_tracking_statuses_for_dropdown(self, client, as_admin):
        statuses = client.get("/api/admin/orders/tracking-statuses", headers=as_admin).json()["statuses"]
        assert {"value": "out_for_delivery", "label": "Out For Delivery"} in statuses

    def test_unknown_order(self, client, as_admin):
        assert _track(client, as_admin, "missing", "processing").status_code == 404


class TestPayment:
    def test_mark_paid_is_idempotent(self, client, as_admin, order):
        url = f"/api/admin/orders/{order['id']}/mark-paid"
        first = client.post(url, headers=as_admin).json()["order"]
        assert first["payment_status"] == "paid"
        assert first["paid_at"]

        second = client.post(url, headers=as_admin).json()["order"]
        assert second["paid_at"] == first["paid_at"]

        history = client.get(f"/api/admin/orders/{order['id']}/tracking", headers=as_admin).json()
        assert [e["status"] for e in history["tracking_history"]].count("payment_confirmed") == 1

    def test_cancelled_order_cannot_be_paid(self, client, as_admin, order):
        _track(client, as_admin, order["id"], "cancelled")
        response = client.post(f"/api/admin/orders/{order['id']}/mark-paid", headers=as_admin)
        assert response.status_code == 409

    def test_filter_by_payment_status(self, client, as_admin, order):
        client.post(f"/api/admin/orders/{order['id']}/mark-paid", headers=as_admin)
        client.post("/api/admin/orders", json=ORDER, headers=as_admin)

        paid = client.get("/api/admin/orders", params={"payment_status": "paid"}, headers=as_admin)
        assert [o["id"] for o in paid.json()["orders"]] == [order["id"]]


class TestCustomerAndPublic:
    def test_customer_sees_orders_by_email(self, client, as_customer, order):
        orders = client.get("/api/orders", headers=as_customer).json()["orders"]
        assert [o["id"] for o in orders] == [order["id"]]

    def test_other_customer_sees_nothing(self, client, make_user, headers_for, order):
        stranger = make_user("customer")
        orders = client.get("/api/orders", headers=headers_for(stranger, admin=False)).json()["orders"]
        assert orders == []

    def test_track_by_tracking_number(self, client, as_admin, order):
        _track(client, as_admin, order["id"], "processing", "Processing")

        response = client.get("/api/track", params={"number": order["tracking_number"].lower()})
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "order"
        assert data["status"] == "processing"
        assert [e["status"] for e in data["events"]] == ["order_placed", "processing"]

    def test_track_by_order_number(self, client, order):
        response = client.get("/api/track", params={"number": order["order_number"]})
        assert response.json()["tracking_number"] == order["tracking_number"]

    def test_track_unknown_number(self, client):
        response = client.get("/api/track", params={"number": "TRK-FX-00000000"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Tracking number not found"

    def test_track_without_number(self, client):
        assert client.get("/api/track").status_code == 400
