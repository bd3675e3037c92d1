"""
Invoice routes for Fixing Maritime backend.
Handles invoice creation, payment recording and PDF download.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Optional

from database import Store
from dependencies import get_store, get_current_admin, get_current_customer
from models.schemas import Actor, InvoiceCreate, InvoiceFromQuote, InvoiceUpdate
from services import invoice_service
from services.pdf_service import generate_invoice_pdf

router = APIRouter()


class MarkPaidRequest(BaseModel):
    payment_method: Optional[str] = None
    payment_ref: Optional[str] = None


# ============ ADMIN ============

@router.get("/admin/invoices")
async def list_invoices(
    status: Optional[str] = None,
    customer_email: Optional[str] = None,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    return {"invoices": await invoice_service.list_invoices(store, status, customer_email)}


@router.post("/admin/invoices", status_code=201)
async def create_invoice(
    data: InvoiceCreate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Create a manual invoice"""
    invoice = await invoice_service.create_invoice(store, admin, data)
    return {"success": True, "invoice": invoice}


@router.post("/admin/invoices/generate-from-quote", status_code=201)
async def generate_from_quote(
    data: InvoiceFromQuote,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Generate an invoice for an accepted quote, adding 7.5% VAT"""
    invoice = await invoice_service.create_invoice_from_quote(store, admin, data.quote_request_id)
    return {"success": True, "invoice": invoice}


@router.get("/admin/invoices/{invoice_id}")
async def get_invoice(invoice_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return {"invoice": await invoice_service.get_invoice_or_404(store, invoice_id)}


@router.patch("/admin/invoices/{invoice_id}")
async def update_invoice(
    invoice_id: str,
    data: InvoiceUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    invoice = await invoice_service.update_invoice(store, admin, invoice_id, data)
    return {"success": True, "invoice": invoice}


@router.post("/admin/invoices/{invoice_id}/mark-paid")
async def mark_invoice_paid(
    invoice_id: str,
    data: MarkPaidRequest,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    invoice = await invoice_service.mark_invoice_paid(
        store, admin, invoice_id, data.payment_method, data.payment_ref
    )
    return {"success": True, "invoice": invoice}


@router.get("/admin/invoices/{invoice_id}/pdf")
async def download_invoice_pdf(
    invoice_id: str,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Download the invoice as a PDF"""
    return await generate_invoice_pdf(store, invoice_id)


# ============ CUSTOMER ============

@router.get("/invoices")
async def my_invoices(user: Actor = Depends(get_current_customer), store: Store = Depends(get_store)):
    return {"invoices": await invoice_service.list_customer_invoices(store, user)}
