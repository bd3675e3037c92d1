"""
Site content routes for Fixing Maritime backend.
Public content resolution and admin content editing.
"""
from fastapi import APIRouter, Depends, Request, Response

from database import Store
from dependencies import get_store, get_current_admin
from models.schemas import Actor, ContentSectionUpdate, SeoUpdate
from services import content_service

router = APIRouter()


@router.get("/content")
async def get_content(request: Request, response: Response):
    """
    Get page sections and SEO settings.

    Answers even when the database is down; `source` says which stage answered.
    """
    # No get_store here: an unreachable store is just a skipped stage
    store = getattr(request.app.state, "store", None)
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    return await content_service.resolve_content(store)


@router.put("/admin/content/sections")
async def save_section(
    data: ContentSectionUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    section = await content_service.upsert_section(store, admin, data)
    return {"success": True, "section": section}


@router.put("/admin/content/seo")
async def save_seo(
    data: SeoUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    seo = await content_service.update_seo(store, admin, data)
    return {"success": True, "seo": seo}


@router.post("/admin/content/seed")
async def seed_content(admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    """Insert the default sections and SEO settings where missing"""
    return await content_service.seed_default_content(store)
