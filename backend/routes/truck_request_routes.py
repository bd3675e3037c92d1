"""
Truck hire request routes for Fixing Maritime backend.
"""
from fastapi import APIRouter, Depends
from typing import Optional

from database import Store
from dependencies import get_store, get_current_admin, get_optional_customer
from models.schemas import Actor, TruckRequestCreate, TruckRequestUpdate
from services import truck_request_service

router = APIRouter()


@router.post("/truck-request", status_code=201)
async def submit_truck_request(
    data: TruckRequestCreate,
    store: Store = Depends(get_store),
    user: Optional[Actor] = Depends(get_optional_customer),
):
    """Request a truck; the response carries the tracking number"""
    return await truck_request_service.submit_truck_request(store, data, user)


@router.get("/admin/truck-requests")
async def list_truck_requests(
    status: Optional[str] = None,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    return {"success": True, "requests": await truck_request_service.list_truck_requests(store, status)}


@router.get("/admin/truck-requests/{request_id}")
async def get_truck_request(request_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return {"success": True, "request": await truck_request_service.get_truck_request_or_404(store, request_id)}


@router.patch("/admin/truck-requests/{request_id}")
async def update_truck_request(
    request_id: str,
    data: TruckRequestUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Move a truck request forward, optionally quoting or assigning a truck"""
    truck_request = await truck_request_service.update_truck_request(store, admin, request_id, data)
    return {"success": True, "request": truck_request}


@router.delete("/admin/truck-requests/{request_id}")
async def delete_truck_request(request_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return await truck_request_service.delete_truck_request(store, admin, request_id)
