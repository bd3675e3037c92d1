"""
Order and tracking lifecycle for Fixing Maritime backend.
Orders are created by admins, move through tracking events, and can be looked up publicly.
"""
from typing import List, Optional
import logging

from database import Store
from errors import ValidationError, NotFoundError, ConflictError
from models.enums import OrderStatus, PaymentStatus, TrackingStatus
from models.schemas import (
    Actor, Order, OrderCreate, TrackingEvent, TrackingEventCreate
)
from services.number_service import NumberService
from services.quote_service import get_accepted_quote
from services.transitions import ORDER_TRANSITIONS
from utils.helpers import normalize_email, utc_now

logger = logging.getLogger(__name__)

# Tracking vocabulary -> order status
TRACKING_TO_ORDER_STATUS = {
    TrackingStatus.order_placed.value: OrderStatus.pending.value,
    TrackingStatus.payment_confirmed.value: OrderStatus.processing.value,
    TrackingStatus.processing.value: OrderStatus.processing.value,
    TrackingStatus.dispatched.value: OrderStatus.in_transit.value,
    TrackingStatus.in_transit.value: OrderStatus.in_transit.value,
    TrackingStatus.out_for_delivery.value: OrderStatus.in_transit.value,
    TrackingStatus.delivered.value: OrderStatus.delivered.value,
    TrackingStatus.cancelled.value: OrderStatus.cancelled.value,
}

TRACKING_LABELS = {
    status.value: status.value.replace("_", " ").title() for status in TrackingStatus
}


def tracking_statuses() -> List[dict]:
    """All tracking statuses for the admin dropdown."""
    return [{"value": value, "label": label} for value, label in TRACKING_LABELS.items()]


async def get_order_or_404(store: Store, order_id: str) -> dict:
    order = await store.find_one("orders", {"id": order_id})
    if not order:
        raise NotFoundError("Order not found")
    return order


async def _record_event(
    store: Store,
    order_id: str,
    status: str,
    title: str,
    description: str,
    updated_by: Optional[str] = None,
    location: Optional[str] = None,
    remarks: Optional[str] = None,
) -> dict:
    event = TrackingEvent(
        order_id=order_id,
        status=status,
        title=title,
        description=description,
        location=location,
        remarks=remarks,
        updated_by=updated_by,
    )
    return await store.insert_one("tracking_events", event.model_dump())


async def _insert_order(store: Store, actor: Actor, **fields) -> dict:
    order = Order(
        order_number=await NumberService.generate(store, "order"),
        tracking_number=await NumberService.generate(store, "tracking"),
        created_by=actor.id,
        **fields,
    )
    doc = await store.insert_one("orders", order.model_dump())
    await _record_event(
        store, order.id, TrackingStatus.order_placed.value,
        "Order Placed", f"Order {order.order_number} has been placed", actor.id,
    )
    logger.info(f"Order {order.order_number} created by {actor.email}")
    return doc


async def create_order(store: Store, actor: Actor, data: OrderCreate) -> dict:
    if not data.user_id and not data.customer_email:
        raise ValidationError("Either user_id or customer_email is required")

    fields = data.model_dump()
    if data.user_id:
        user = await store.find_one("users", {"id": data.user_id})
        if not user:
            raise NotFoundError("User not found")
        fields["customer_email"] = fields.get("customer_email") or user["email"]
        fields["customer_name"] = fields.get("customer_name") or user.get("name")
    if fields.get("customer_email"):
        fields["customer_email"] = normalize_email(fields["customer_email"])

    return await _insert_order(store, actor, **fields)


async def create_order_from_quote(store: Store, actor: Actor, quote_id: str) -> dict:
    quote = await get_accepted_quote(store, quote_id)

    existing = await store.find_one("orders", {"quote_request_id": quote_id})
    if existing:
        raise ConflictError(f"Order {existing['order_number']} already exists for this quote")

    if quote.get("quoted_amount") is None:
        raise ValidationError("Quote has no quoted amount")

    return await _insert_order(
        store,
        actor,
        user_id=quote.get("user_id"),
        customer_email=quote["email"],
        customer_name=quote.get("name"),
        service_id=quote.get("service_id"),
        service_name=quote["service_name"],
        description=quote.get("project_description"),
        quote_request_id=quote_id,
        amount=quote["quoted_amount"],
        currency=quote.get("quoted_currency") or "USD",
    )


async def list_orders(
    store: Store, status: Optional[str] = None, payment_status: Optional[str] = None
) -> List[dict]:
    query = {}
    if status:
        query["status"] = ORDER_TRANSITIONS.validate(status)
    if payment_status:
        if payment_status not in [p.value for p in PaymentStatus]:
            raise ValidationError("Invalid payment status")
        query["payment_status"] = payment_status
    return await store.find("orders", query, sort=[("created_at", -1)])


async def list_customer_orders(store: Store, actor: Actor) -> List[dict]:
    return await store.find(
        "orders",
        {"$or": [{"user_id": actor.id}, {"customer_email": actor.email}]},
        sort=[("created_at", -1)],
    )


async def get_tracking_history(store: Store, order_id: str) -> List[dict]:
    return await store.find("tracking_events", {"order_id": order_id}, sort=[("created_at", -1)])


async def add_tracking_event(
    store: Store, actor: Actor, order_id: str, data: TrackingEventCreate
) -> dict:
    """
    Append a tracking event and move the order to the mapped status.

    The order's transition table is checked before anything is written, so a
    rejected move leaves neither an event nor a status change behind.
    """
    if data.status not in TRACKING_TO_ORDER_STATUS:
        raise ValidationError(
            f"Invalid tracking status. Must be one of: {', '.join(TRACKING_TO_ORDER_STATUS)}"
        )

    order = await get_order_or_404(store, order_id)
    new_status = TRACKING_TO_ORDER_STATUS[data.status]
    # Several tracking statuses share one order status; those only add history
    changed = ORDER_TRANSITIONS.check(order["status"], new_status)

    event = await _record_event(
        store, order_id, data.status, data.title, data.description,
        actor.id, data.location, data.remarks,
    )
    if changed:
        order = await store.update_one(
            "orders", {"id": order_id}, {"status": new_status, "updated_at": utc_now()}
        )
        logger.info(f"Order {order['order_number']} moved to {new_status} by {actor.email}")

    return {
        "success": True,
        "tracking_event": event,
        "order": {**order, "tracking_history": await get_tracking_history(store, order_id)},
    }


async def mark_order_paid(store: Store, actor: Actor, order_id: str) -> dict:
    order = await get_order_or_404(store, order_id)
    if order.get("payment_status") == PaymentStatus.paid.value:
        return order
    if order["status"] == OrderStatus.cancelled.value:
        raise ConflictError("Cannot take payment for a cancelled order")

    order = await store.update_one(
        "orders",
        {"id": order_id},
        {"payment_status": PaymentStatus.paid.value, "paid_at": utc_now(), "updated_at": utc_now()},
    )
    await _record_event(
        store, order_id, TrackingStatus.payment_confirmed.value,
        "Payment Confirmed", f"Payment received for order {order['order_number']}", actor.id,
    )
    logger.info(f"Order {order['order_number']} marked paid by {actor.email}")
    return order


async def track(store: Store, tracking_number: str) -> dict:
    """Public lookup by tracking or order number, then by truck request tracking number."""
    if not tracking_number or not tracking_number.strip():
        raise ValidationError("Tracking number is required")
    tracking_number = tracking_number.strip().upper()

    order = await store.find_one(
        "orders",
        {"$or": [{"tracking_number": tracking_number}, {"order_number": tracking_number}]},
    )
    if order:
        events = await store.find(
            "tracking_events", {"order_id": order["id"]}, sort=[("created_at", 1)]
        )
        return {
            "type": "order",
            "order_number": order["order_number"],
            "tracking_number": order["tracking_number"],
            "service": order.get("service_name") or "Maritime Service",
            "status": order["status"],
            "payment_status": order.get("payment_status"),
            "created_at": order["created_at"],
            "updated_at": order["updated_at"],
            "customer": order.get("customer_name"),
            "events": [
                {
                    "id": e["id"],
                    "status": e["status"],
                    "title": e["title"],
                    "location": e.get("location") or "Processing Center",
                    "timestamp": e["created_at"],
                    "description": e["description"],
                }
                for e in events
            ],
        }

    truck_request = await store.find_one("truck_requests", {"tracking_number": tracking_number})
    if truck_request:
        return {
            "type": "truck_request",
            "tracking_number": truck_request["tracking_number"],
            "service": truck_request.get("service_type") or "Truck Service",
            "status": truck_request["status"],
            "created_at": truck_request["created_at"],
            "updated_at": truck_request["updated_at"],
            "customer": truck_request.get("contact_name"),
            "pickup": truck_request.get("pickup_address"),
            "delivery": truck_request.get("delivery_address"),
            "events": [],
        }

    raise NotFoundError("Tracking number not found")
