"""
Service catalogue routes for Fixing Maritime backend.
Public listing of active services and admin catalogue management.
"""
from fastapi import APIRouter, Depends, Request

from database import Store
from dependencies import get_store, get_current_admin
from models.schemas import Actor, ServiceCreate, ServiceUpdate
from services import service_catalog_service

router = APIRouter()


@router.get("/services")
async def list_public_services(request: Request):
    """Active services; the built-in catalogue answers when the database cannot"""
    store = getattr(request.app.state, "store", None)
    return await service_catalog_service.list_public_services(store)


@router.get("/admin/services")
async def list_services(admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return {"services": await service_catalog_service.list_services(store)}


@router.post("/admin/services", status_code=201)
async def create_service(
    data: ServiceCreate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    service = await service_catalog_service.create_service(store, admin, data)
    return {"service": service}


@router.post("/admin/services/seed")
async def seed_services(admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return await service_catalog_service.seed_default_services(store)


@router.get("/admin/services/{service_id}")
async def get_service(service_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return {"service": await service_catalog_service.get_service(store, service_id)}


@router.put("/admin/services/{service_id}")
async def update_service(
    service_id: str,
    data: ServiceUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    service = await service_catalog_service.update_service(store, admin, service_id, data)
    return {"service": service}


@router.delete("/admin/services/{service_id}")
async def delete_service(service_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return await service_catalog_service.delete_service(store, admin, service_id)
