"""
Truck hire requests for Fixing Maritime backend.
"""
from typing import List, Optional
import logging

from database import Store
from errors import NotFoundError, ValidationError
from models.schemas import Actor, TruckRequest, TruckRequestCreate, TruckRequestUpdate
from services.number_service import NumberService
from services.transitions import TRUCK_REQUEST_TRANSITIONS
from utils.helpers import normalize_email, utc_now

logger = logging.getLogger(__name__)


async def get_truck_request_or_404(store: Store, request_id: str) -> dict:
    truck_request = await store.find_one("truck_requests", {"id": request_id})
    if not truck_request:
        raise NotFoundError("Truck request not found")
    return truck_request


async def submit_truck_request(
    store: Store, data: TruckRequestCreate, actor: Optional[Actor] = None
) -> dict:
    if data.delivery_date < data.pickup_date:
        raise ValidationError("delivery_date cannot be before pickup_date")

    truck_request = TruckRequest(
        **data.model_dump(exclude={"email"}),
        email=normalize_email(data.email),
        tracking_number=await NumberService.generate(store, "truck_request"),
        user_id=actor.id if actor else None,
    )
    doc = await store.insert_one("truck_requests", truck_request.model_dump())
    logger.info(f"Truck request {truck_request.tracking_number} submitted by {truck_request.email}")
    return {
        "message": "Truck request submitted successfully",
        "request_id": doc["id"],
        "tracking_number": doc["tracking_number"],
    }


async def list_truck_requests(store: Store, status: Optional[str] = None) -> List[dict]:
    query = {}
    if status:
        query["status"] = TRUCK_REQUEST_TRANSITIONS.validate(status)
    return await store.find("truck_requests", query, sort=[("created_at", -1)])


async def update_truck_request(
    store: Store, actor: Actor, request_id: str, data: TruckRequestUpdate
) -> dict:
    truck_request = await get_truck_request_or_404(store, request_id)

    changes = {}
    if TRUCK_REQUEST_TRANSITIONS.check(truck_request["status"], data.status):
        changes["status"] = data.status
    if data.quoted_amount is not None:
        changes["quoted_amount"] = data.quoted_amount
        changes["quoted_currency"] = data.quoted_currency or truck_request.get("quoted_currency") or "NGN"
    if data.assigned_truck_id is not None:
        changes["assigned_truck_id"] = data.assigned_truck_id

    if not changes:
        return truck_request

    changes["updated_at"] = utc_now()
    updated = await store.update_one("truck_requests", {"id": request_id}, changes)
    logger.info(f"Truck request {truck_request['tracking_number']} updated by {actor.email}: {sorted(changes)}")
    return updated


async def delete_truck_request(store: Store, actor: Actor, request_id: str) -> dict:
    truck_request = await get_truck_request_or_404(store, request_id)
    await store.delete_one("truck_requests", {"id": request_id})
    logger.info(f"Truck request {truck_request['tracking_number']} deleted by {actor.email}")
    return {"success": True, "message": "Truck request deleted successfully"}
