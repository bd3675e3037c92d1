"""
Admin dashboard statistics for Fixing Maritime backend.
"""
from database import Store
from models.enums import (
    InvoiceStatus, OrderStatus, PaymentStatus, QuoteStatus, RegistrationStatus,
    TruckRequestStatus, UserRole
)


# collection -> (status field, statuses to break down)
BREAKDOWNS = {
    "users": ("role", UserRole),
    "quote_requests": ("status", QuoteStatus),
    "orders": ("status", OrderStatus),
    "invoices": ("status", InvoiceStatus),
    "truck_registrations": ("status", RegistrationStatus),
    "partner_registrations": ("status", RegistrationStatus),
    "truck_requests": ("status", TruckRequestStatus),
}

RECENT_QUOTE_FIELDS = ("id", "name", "service_name", "status", "created_at")


async def dashboard_stats(store: Store) -> dict:
    stats = {}
    for collection, (field, values) in BREAKDOWNS.items():
        breakdown = {value.value: await store.count(collection, {field: value.value}) for value in values}
        stats[collection] = {"total": await store.count(collection), "by_" + field: breakdown}

    paid_orders = await store.find("orders", {"payment_status": PaymentStatus.paid.value})
    paid_invoices = await store.find("invoices", {"status": InvoiceStatus.paid.value})
    stats["revenue"] = {
        "orders_paid": round(sum(o.get("amount", 0) for o in paid_orders), 2),
        "invoices_paid": round(sum(i.get("total", 0) for i in paid_invoices), 2),
    }

    recent = await store.find("quote_requests", sort=[("created_at", -1)], limit=5)
    stats["recent_quotes"] = [{k: q.get(k) for k in RECENT_QUOTE_FIELDS} for q in recent]
    return stats
