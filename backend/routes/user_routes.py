"""
Admin user management routes for Fixing Maritime backend.
Handles user CRUD, activation/suspension, and admin promotion/demotion.
"""
from fastapi import APIRouter, Depends
from typing import Optional

from database import Store
from dependencies import get_store, get_current_admin
from models.schemas import (
    Actor, UserCreate, UserUpdate, UserStatusUpdate, AdminCreate, RemoveAdminRequest
)
from services import user_service

router = APIRouter()


@router.get("/admin/users")
async def list_users(
    role: Optional[str] = None,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Get all users the admin is allowed to see, with order stats"""
    users = await user_service.list_users(store, admin, role)
    return {"users": users}


@router.post("/admin/users", status_code=201)
async def create_user(
    data: UserCreate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    user = await user_service.create_user(store, admin, data)
    return {"message": "User created successfully", "user": user}


# Declared before /admin/users/{user_id} so "admins" is not read as an id
@router.get("/admin/users/admins")
async def list_admins(admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    """Get all users holding an admin role"""
    return {"admins": await user_service.list_admins(store, admin)}


@router.post("/admin/users/create-admin", status_code=201)
async def create_admin(
    data: AdminCreate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Create an admin account (super admin only)"""
    user = await user_service.create_admin(store, admin, data)
    return {"success": True, "message": "Admin user created successfully", "user": user}


@router.post("/admin/users/remove-admin")
async def remove_admin(
    data: RemoveAdminRequest,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Demote an admin to customer (super admin only)"""
    user = await user_service.remove_admin(store, admin, data.user_id)
    return {"success": True, "message": "Admin privileges removed successfully", "user": user}


@router.get("/admin/users/{user_id}")
async def get_user(user_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return {"user": await user_service.get_user(store, admin, user_id)}


@router.put("/admin/users/{user_id}")
async def update_user(
    user_id: str,
    data: UserUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    user = await user_service.update_user(store, admin, user_id, data)
    return {"message": "User updated successfully", "user": user}


@router.delete("/admin/users/{user_id}")
async def delete_user(user_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return await user_service.delete_user(store, admin, user_id)


@router.post("/admin/users/{user_id}/status")
async def set_user_status(
    user_id: str,
    data: UserStatusUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Activate or suspend a user account"""
    return await user_service.set_user_status(store, admin, user_id, data.action)
