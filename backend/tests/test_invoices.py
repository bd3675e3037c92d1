"""
Invoice Tests
Manual invoices, quote invoices with VAT, payment recording and PDF download.
"""
import pytest

INVOICE = {
    "customer_name": "Buyer",
    "customer_email": "Buyer@Example.com",
    "service_name": "Warehousing",
    "description": "Bonded storage, March",
    "amount": 2000,
    "tax": 150,
}


@pytest.fixture
def invoice(client, as_admin):
    response = client.post("/api/admin/invoices", json=INVOICE, headers=as_admin)
    assert response.status_code == 201, f"Expected 201, got {response.status_code}: {response.text}"
    return response.json()["invoice"]


def _patch(client, headers, invoice_id, **changes):
    return client.patch(f"/api/admin/invoices/{invoice_id}", json=changes, headers=headers)


class TestCreateInvoice:
    def test_totals_and_defaults(self, invoice):
        assert invoice["total"] == 2150
        assert invoice["currency"] == "NGN"
        assert invoice["status"] == "pending"
        assert invoice["customer_email"] == "buyer@example.com"
        assert invoice["invoice_number"].startswith("INV-")
        assert invoice["due_date"] > invoice["created_at"]

    def test_linked_order_supplies_customer(self, client, customer, as_admin):
        order = client.post(
            "/api/admin/orders",
            json={"user_id": customer["id"], "service_name": "Haulage", "amount": 100},
            headers=as_admin,
        ).json()["order"]

        response = client.post(
            "/api/admin/invoices", json={**INVOICE, "order_id": order["id"]}, headers=as_admin
        )
        assert response.json()["invoice"]["customer_id"] == customer["id"]

    def test_unknown_order(self, client, as_admin):
        response = client.post("/api/admin/invoices", json={**INVOICE, "order_id": "nope"}, headers=as_admin)
        assert response.status_code == 404

    def test_missing_description(self, client, as_admin):
        payload = {k: v for k, v in INVOICE.items() if k != "description"}
        assert client.post("/api/admin/invoices", json=payload, headers=as_admin).status_code == 400


class TestInvoiceFromQuote:
    def test_vat_is_added(self, client, as_admin, accepted_quote):
        response = client.post(
            "/api/admin/invoices/generate-from-quote",
            json={"quote_request_id": accepted_quote["id"]},
            headers=as_admin,
        )
        assert response.status_code == 201, response.text
        invoice = response.json()["invoice"]
        assert invoice["amount"] == 1000
        assert invoice["tax"] == 75
        assert invoice["total"] == 1075
        assert invoice["currency"] == "USD"
        assert invoice["quote_request_id"] == accepted_quote["id"]
        assert len(invoice["items"]) == 1

    def test_one_invoice_per_quote(self, client, as_admin, accepted_quote):
        payload = {"quote_request_id": accepted_quote["id"]}
        client.post("/api/admin/invoices/generate-from-quote", json=payload, headers=as_admin)
        again = client.post("/api/admin/invoices/generate-from-quote", json=payload, headers=as_admin)
        assert again.status_code == 409

    def test_unknown_quote(self, client, as_admin):
        response = client.post(
            "/api/admin/invoices/generate-from-quote", json={"quote_request_id": "nope"}, headers=as_admin
        )
        assert response.status_code == 404


class TestInvoicePayment:
    def test_paid_stamps_payment_details(self, client, as_admin, invoice):
        response = _patch(client, as_admin, invoice["id"], status="paid",
                          payment_method="bank_transfer", payment_ref="GTB-0042")
        assert response.status_code == 200
        paid = response.json()["invoice"]
        assert paid["status"] == "paid"
        assert paid["paid_at"]
        assert paid["payment_method"] == "bank_transfer"
        assert paid["payment_ref"] == "GTB-0042"

    def test_paying_twice_keeps_paid_at(self, client, as_admin, invoice):
        url = f"/api/admin/invoices/{invoice['id']}/mark-paid"
        first = client.post(url, json={"payment_method": "cash"}, headers=as_admin).json()["invoice"]
        second = client.post(url, json={"payment_method": "card"}, headers=as_admin).json()["invoice"]
        assert second["paid_at"] == first["paid_at"]
        assert second["payment_method"] == "cash"

    def test_paid_invoice_cannot_be_cancelled(self, client, as_admin, invoice):
        _patch(client, as_admin, invoice["id"], status="paid")
        response = _patch(client, as_admin, invoice["id"], status="cancelled")
        assert response.status_code == 409

    def test_overdue_cannot_be_paid(self, client, as_admin, invoice):
        assert _patch(client, as_admin, invoice["id"], status="overdue").status_code == 200
        assert _patch(client, as_admin, invoice["id"], status="paid").status_code == 409
        assert _patch(client, as_admin, invoice["id"], status="cancelled").status_code == 200

    def test_unknown_status(self, client, as_admin, invoice):
        assert _patch(client, as_admin, invoice["id"], status="refunded").status_code == 400


class TestInvoiceEdits:
    def test_amount_edit_recomputes_total(self, client, as_admin, invoice):
        response = _patch(client, as_admin, invoice["id"], amount=3000)
        assert response.json()["invoice"]["total"] == 3150

    def test_paid_invoice_is_locked(self, client, as_admin, invoice):
        _patch(client, as_admin, invoice["id"], status="paid")
        response = _patch(client, as_admin, invoice["id"], notes="late fee")
        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot edit a paid invoice"

    def test_empty_patch_changes_nothing(self, client, as_admin, invoice):
        response = _patch(client, as_admin, invoice["id"])
        assert response.json()["invoice"]["updated_at"] == invoice["updated_at"]


class TestInvoiceAccess:
    def test_pdf_download(self, client, as_admin, invoice):
        response = client.get(f"/api/admin/invoices/{invoice['id']}/pdf", headers=as_admin)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")
        assert invoice["invoice_number"] in response.headers["content-disposition"]

    def test_pdf_for_unknown_invoice(self, client, as_admin):
        assert client.get("/api/admin/invoices/nope/pdf", headers=as_admin).status_code == 404

    def test_filter_by_status(self, client, as_admin, invoice):
        client.post("/api/admin/invoices", json=INVOICE, headers=as_admin)
        _patch(client, as_admin, invoice["id"], status="paid")

        paid = client.get("/api/admin/invoices", params={"status": "paid"}, headers=as_admin).json()
        assert [i["id"] for i in paid["invoices"]] == [invoice["id"]]

    def test_customer_sees_own_invoices(self, client, as_customer, invoice):
        response = client.get("/api/invoices", headers=as_customer)
        assert [i["id"] for i in response.json()["invoices"]] == [invoice["id"]]

    def test_customer_cannot_use_admin_routes(self, client, as_customer, invoice):
        response = client.get(f"/api/admin/invoices/{invoice['id']}", headers=as_customer)
        assert response.status_code == 401
