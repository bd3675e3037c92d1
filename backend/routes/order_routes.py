"""
Order and tracking routes for Fixing Maritime backend.
Admin order management, customer order history and public tracking.
"""
from fastapi import APIRouter, Depends
from typing import Optional

from database import Store
from dependencies import get_store, get_current_admin, get_current_customer
from models.schemas import Actor, OrderCreate, OrderFromQuote, TrackingEventCreate
from services import order_service

router = APIRouter()


# ============ ADMIN ============

@router.get("/admin/orders")
async def list_orders(
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    return {"orders": await order_service.list_orders(store, status, payment_status)}


@router.post("/admin/orders", status_code=201)
async def create_order(
    data: OrderCreate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Create an order directly for a user or customer email"""
    order = await order_service.create_order(store, admin, data)
    return {"success": True, "order": order}


@router.post("/admin/orders/from-quote", status_code=201)
async def create_order_from_quote(
    data: OrderFromQuote,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Create the order for an accepted quote (at most one per quote)"""
    order = await order_service.create_order_from_quote(store, admin, data.quote_request_id)
    return {"success": True, "order": order}


@router.get("/admin/orders/tracking-statuses")
async def list_tracking_statuses(admin: Actor = Depends(get_current_admin)):
    return {"statuses": order_service.tracking_statuses()}


@router.get("/admin/orders/{order_id}")
async def get_order(order_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    order = await order_service.get_order_or_404(store, order_id)
    order["tracking_history"] = await order_service.get_tracking_history(store, order_id)
    return {"order": order}


@router.get("/admin/orders/{order_id}/tracking")
async def get_order_tracking(order_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    await order_service.get_order_or_404(store, order_id)
    return {"tracking_history": await order_service.get_tracking_history(store, order_id)}


@router.post("/admin/orders/{order_id}/tracking", status_code=201)
async def add_tracking_event(
    order_id: str,
    data: TrackingEventCreate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Record a tracking event and advance the order status"""
    return await order_service.add_tracking_event(store, admin, order_id, data)


@router.post("/admin/orders/{order_id}/mark-paid")
async def mark_order_paid(order_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    order = await order_service.mark_order_paid(store, admin, order_id)
    return {"success": True, "order": order}


# ============ CUSTOMER / PUBLIC ============

@router.get("/orders")
async def my_orders(user: Actor = Depends(get_current_customer), store: Store = Depends(get_store)):
    """Get the current customer's orders"""
    return {"orders": await order_service.list_customer_orders(store, user)}


@router.get("/track")
async def track(number: Optional[str] = None, store: Store = Depends(get_store)):
    """Public shipment lookup by tracking number or order number"""
    return await order_service.track(store, number)
