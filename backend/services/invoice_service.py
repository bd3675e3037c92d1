"""
Invoice lifecycle for Fixing Maritime backend.
Manual invoices, invoices generated from accepted quotes, payment recording.
"""
from typing import List, Optional
import logging

from config import DEFAULT_CURRENCY, DEFAULT_PAYMENT_TERMS_DAYS, QUOTE_INVOICE_VAT_RATE
from database import Store
from errors import ConflictError, NotFoundError, ValidationError
from models.enums import InvoiceStatus
from models.schemas import Actor, Invoice, InvoiceCreate, InvoiceUpdate
from services.number_service import NumberService
from services.quote_service import get_accepted_quote
from services.transitions import INVOICE_TRANSITIONS
from utils.helpers import calculate_due_date, normalize_email, utc_now

logger = logging.getLogger(__name__)


async def get_invoice_or_404(store: Store, invoice_id: str) -> dict:
    invoice = await store.find_one("invoices", {"id": invoice_id})
    if not invoice:
        raise NotFoundError("Invoice not found")
    return invoice


async def _insert_invoice(store: Store, actor: Actor, **fields) -> dict:
    amount = fields.pop("amount")
    tax = fields.pop("tax", 0) or 0
    invoice = Invoice(
        invoice_number=await NumberService.generate(store, "invoice"),
        amount=amount,
        tax=tax,
        total=round(amount + tax, 2),
        currency=fields.pop("currency", None) or DEFAULT_CURRENCY,
        due_date=fields.pop("due_date", None) or calculate_due_date(DEFAULT_PAYMENT_TERMS_DAYS),
        created_by=actor.id,
        **fields,
    )
    doc = await store.insert_one("invoices", invoice.model_dump())
    logger.info(f"Invoice {invoice.invoice_number} created by {actor.email} for {invoice.total} {invoice.currency}")
    return doc


async def create_invoice(store: Store, actor: Actor, data: InvoiceCreate) -> dict:
    fields = data.model_dump()
    fields["customer_email"] = normalize_email(data.customer_email)
    if data.order_id:
        order = await store.find_one("orders", {"id": data.order_id})
        if not order:
            raise NotFoundError("Order not found")
        fields["quote_request_id"] = order.get("quote_request_id")
        if not fields.get("customer_id"):
            fields["customer_id"] = order.get("user_id")
    return await _insert_invoice(store, actor, **fields)


async def create_invoice_from_quote(store: Store, actor: Actor, quote_id: str) -> dict:
    """
    Generate an invoice from an accepted quote.

    VAT at 7.5% is added on top of the quoted amount, in the quote's currency.
    """
    quote = await get_accepted_quote(store, quote_id)
    if quote.get("quoted_amount") is None:
        raise ValidationError("Quote has no quoted amount")

    existing = await store.find_one("invoices", {"quote_request_id": quote_id})
    if existing:
        raise ConflictError(f"Invoice {existing['invoice_number']} already exists for this quote")

    amount = float(quote["quoted_amount"])
    tax = round(amount * QUOTE_INVOICE_VAT_RATE, 2)
    return await _insert_invoice(
        store,
        actor,
        customer_id=quote.get("user_id"),
        customer_name=quote["name"],
        customer_email=quote["email"],
        customer_phone=quote.get("phone"),
        service_id=quote.get("service_id"),
        service_name=quote["service_name"],
        description=quote["project_description"],
        amount=amount,
        tax=tax,
        currency=quote.get("quoted_currency"),
        quote_request_id=quote_id,
        notes=quote.get("admin_response"),
        items=[{
            "description": quote["service_name"],
            "quantity": 1,
            "unit_price": amount,
            "amount": amount,
        }],
    )


async def list_invoices(
    store: Store, status: Optional[str] = None, customer_email: Optional[str] = None
) -> List[dict]:
    query = {}
    if status:
        query["status"] = INVOICE_TRANSITIONS.validate(status)
    if customer_email:
        query["customer_email"] = normalize_email(customer_email)
    return await store.find("invoices", query, sort=[("created_at", -1)])


async def list_customer_invoices(store: Store, actor: Actor) -> List[dict]:
    return await store.find(
        "invoices",
        {"$or": [{"customer_id": actor.id}, {"customer_email": actor.email}]},
        sort=[("created_at", -1)],
    )


async def update_invoice(store: Store, actor: Actor, invoice_id: str, data: InvoiceUpdate) -> dict:
    """
    Apply a status change and/or field edits to an invoice.

    Moving to paid stamps paid_at together with the payment fields. Re-sending the
    current status changes nothing, so an already-paid invoice keeps its paid_at.
    Amounts can only be edited while the invoice is still open.
    """
    invoice = await get_invoice_or_404(store, invoice_id)
    changes = {}

    if data.status is not None and INVOICE_TRANSITIONS.check(invoice["status"], data.status):
        changes["status"] = data.status
        if data.status == InvoiceStatus.paid.value:
            changes["paid_at"] = utc_now()
            changes["payment_method"] = data.payment_method
            changes["payment_ref"] = data.payment_ref

    edits = data.model_dump(exclude_unset=True, exclude={"status", "payment_method", "payment_ref"})
    edits = {k: v for k, v in edits.items() if v is not None}
    if edits:
        if INVOICE_TRANSITIONS.is_terminal(invoice["status"]):
            raise ConflictError(f"Cannot edit a {invoice['status']} invoice")
        changes.update(edits)
        if "amount" in edits or "tax" in edits:
            amount = edits.get("amount", invoice["amount"])
            tax = edits.get("tax", invoice.get("tax", 0))
            changes["total"] = round(amount + tax, 2)

    if not changes:
        return invoice

    changes["updated_at"] = utc_now()
    updated = await store.update_one("invoices", {"id": invoice_id}, changes)
    logger.info(f"Invoice {invoice['invoice_number']} updated by {actor.email}: {sorted(changes)}")
    return updated


async def mark_invoice_paid(
    store: Store,
    actor: Actor,
    invoice_id: str,
    payment_method: Optional[str] = None,
    payment_ref: Optional[str] = None,
) -> dict:
    return await update_invoice(
        store,
        actor,
        invoice_id,
        InvoiceUpdate(
            status=InvoiceStatus.paid.value,
            payment_method=payment_method,
            payment_ref=payment_ref,
        ),
    )
