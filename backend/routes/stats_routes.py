"""
Admin dashboard routes for Fixing Maritime backend.
"""
from fastapi import APIRouter, Depends

from database import Store
from dependencies import get_store, get_current_admin
from models.schemas import Actor
from services.stats_service import dashboard_stats

router = APIRouter()


@router.get("/admin/stats")
async def get_stats(admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    """Counts per entity and per status for the dashboard"""
    return await dashboard_stats(store)
