"""
Truck owner and partner registration routes for Fixing Maritime backend.
"""
from fastapi import APIRouter, Depends
from typing import Optional

from database import Store
from dependencies import get_store, get_current_admin
from models.schemas import (
    Actor, PartnerRegistrationCreate, RegistrationStatusUpdate, TruckRegistrationCreate
)
from services import registration_service
from services.registration_service import TRUCK, PARTNER

router = APIRouter()


# ============ PUBLIC ============

@router.post("/truck-registration", status_code=201)
async def submit_truck_registration(data: TruckRegistrationCreate, store: Store = Depends(get_store)):
    """Register a truck and its owner for review"""
    return await registration_service.submit_truck_registration(store, data)


@router.post("/partner-registration", status_code=201)
async def submit_partner_registration(data: PartnerRegistrationCreate, store: Store = Depends(get_store)):
    """Register a partner company for review"""
    return await registration_service.submit_partner_registration(store, data)


# ============ ADMIN: TRUCKS ============

@router.get("/admin/truck-registrations")
async def list_truck_registrations(
    status: Optional[str] = None,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    registrations = await registration_service.list_registrations(store, TRUCK, status)
    return {"success": True, "registrations": registrations}


@router.get("/admin/truck-registrations/{registration_id}")
async def get_truck_registration(
    registration_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)
):
    registration = await registration_service.get_registration_or_404(store, TRUCK, registration_id)
    return {"success": True, "registration": registration}


@router.patch("/admin/truck-registrations/{registration_id}")
async def review_truck_registration(
    registration_id: str,
    data: RegistrationStatusUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    registration = await registration_service.review_registration(store, admin, TRUCK, registration_id, data)
    return {"success": True, "registration": registration}


@router.delete("/admin/truck-registrations/{registration_id}")
async def delete_truck_registration(
    registration_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)
):
    return await registration_service.delete_registration(store, admin, TRUCK, registration_id)


# ============ ADMIN: PARTNERS ============

@router.get("/admin/partner-registrations")
async def list_partner_registrations(
    status: Optional[str] = None,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    registrations = await registration_service.list_registrations(store, PARTNER, status)
    return {"success": True, "registrations": registrations}


@router.get("/admin/partner-registrations/{registration_id}")
async def get_partner_registration(
    registration_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)
):
    registration = await registration_service.get_registration_or_404(store, PARTNER, registration_id)
    return {"success": True, "registration": registration}


@router.patch("/admin/partner-registrations/{registration_id}")
async def review_partner_registration(
    registration_id: str,
    data: RegistrationStatusUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    registration = await registration_service.review_registration(store, admin, PARTNER, registration_id, data)
    return {"success": True, "registration": registration}


@router.delete("/admin/partner-registrations/{registration_id}")
async def delete_partner_registration(
    registration_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)
):
    return await registration_service.delete_registration(store, admin, PARTNER, registration_id)
