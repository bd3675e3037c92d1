"""
Quote request routes for Fixing Maritime backend.
Public submission, customer views and claiming, admin review.
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from database import Store
from dependencies import get_store, get_current_admin, get_current_customer, get_optional_customer
from models.schemas import Actor, ClaimRequest, QuoteRequestCreate, QuoteRequestUpdate
from services import quote_service

router = APIRouter()


# ============ PUBLIC / CUSTOMER ============

@router.post("/quote-requests", status_code=201)
async def submit_quote_request(
    data: QuoteRequestCreate,
    store: Store = Depends(get_store),
    user: Optional[Actor] = Depends(get_optional_customer),
):
    """Submit a quote request; signed-in customers own it immediately"""
    quote = await quote_service.submit_quote(store, data, user)
    return {"success": True, "message": "Quote request submitted successfully", "quote_request": quote}


@router.get("/quote-requests/mine")
async def my_quote_requests(user: Actor = Depends(get_current_customer), store: Store = Depends(get_store)):
    return {"quote_requests": await quote_service.list_customer_quotes(store, user)}


@router.get("/quote-requests/claim")
async def preview_claimable_quotes(
    email: str,
    user: Actor = Depends(get_current_customer),
    store: Store = Depends(get_store),
):
    """List quotes submitted with this email that nobody owns yet"""
    return await quote_service.find_unclaimed(store, email)


@router.post("/quote-requests/claim")
async def claim_quote_requests(
    data: ClaimRequest,
    user: Actor = Depends(get_current_customer),
    store: Store = Depends(get_store),
):
    return await quote_service.claim_quotes(store, user, data.email)


# ============ ADMIN ============

@router.get("/admin/quote-requests")
async def list_quote_requests(
    status: Optional[str] = None,
    service_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    return await quote_service.list_quotes(store, status, service_id, page, limit)


@router.get("/admin/quote-requests/{quote_id}")
async def get_quote_request(quote_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return {"quote_request": await quote_service.get_quote_or_404(store, quote_id)}


@router.put("/admin/quote-requests/{quote_id}")
async def update_quote_request(
    quote_id: str,
    data: QuoteRequestUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    """Respond to a quote request and/or move its status"""
    quote = await quote_service.update_quote(store, admin, quote_id, data)
    return {"success": True, "quote_request": quote}


@router.delete("/admin/quote-requests/{quote_id}")
async def delete_quote_request(quote_id: str, admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    return await quote_service.delete_quote(store, admin, quote_id)
