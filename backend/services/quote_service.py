"""
Quote request lifecycle for Fixing Maritime backend.
Public submission, admin responses, and claiming anonymous quotes by email.
"""
from typing import Optional
import logging

from database import Store
from errors import ConflictError, NotFoundError
from models.enums import QuoteStatus
from models.schemas import Actor, QuoteRequest, QuoteRequestCreate, QuoteRequestUpdate
from services.transitions import QUOTE_TRANSITIONS
from utils.helpers import normalize_email, pagination, utc_now

logger = logging.getLogger(__name__)

CLAIM_SUMMARY_FIELDS = ("id", "service_name", "status", "created_at", "project_description")


async def get_quote_or_404(store: Store, quote_id: str) -> dict:
    quote = await store.find_one("quote_requests", {"id": quote_id})
    if not quote:
        raise NotFoundError("Quote request not found")
    return quote


async def submit_quote(store: Store, data: QuoteRequestCreate, actor: Optional[Actor] = None) -> dict:
    quote = QuoteRequest(
        **data.model_dump(exclude={"email"}),
        email=normalize_email(data.email),
        user_id=actor.id if actor else None,
    )
    doc = await store.insert_one("quote_requests", quote.model_dump())
    logger.info(f"Quote request {quote.id} submitted for {quote.service_name}")
    return doc


async def list_quotes(
    store: Store,
    status: Optional[str] = None,
    service_id: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> dict:
    query = {}
    if status:
        query["status"] = QUOTE_TRANSITIONS.validate(status)
    if service_id:
        query["service_id"] = service_id

    total = await store.count("quote_requests", query)
    quotes = await store.find(
        "quote_requests", query, sort=[("created_at", -1)], skip=(page - 1) * limit, limit=limit
    )
    return {"quote_requests": quotes, "pagination": pagination(page, limit, total)}


async def list_customer_quotes(store: Store, actor: Actor) -> list:
    return await store.find("quote_requests", {"user_id": actor.id}, sort=[("created_at", -1)])


async def update_quote(store: Store, actor: Actor, quote_id: str, data: QuoteRequestUpdate) -> dict:
    quote = await get_quote_or_404(store, quote_id)

    changes = {}
    if data.status is not None:
        if QUOTE_TRANSITIONS.check(quote["status"], data.status):
            changes["status"] = data.status

    if data.admin_response is not None:
        changes["admin_response"] = data.admin_response
        changes["responded_by"] = actor.id
        changes["responded_at"] = utc_now()

    if data.quoted_amount is not None:
        changes["quoted_amount"] = data.quoted_amount
        changes["quoted_currency"] = data.quoted_currency

    if not changes:
        return quote

    changes["updated_at"] = utc_now()
    updated = await store.update_one("quote_requests", {"id": quote_id}, changes)
    logger.info(f"Quote request {quote_id} updated by {actor.email}: {quote['status']} -> {updated['status']}")
    return updated


async def delete_quote(store: Store, actor: Actor, quote_id: str) -> dict:
    await get_quote_or_404(store, quote_id)
    await store.delete_one("quote_requests", {"id": quote_id})
    logger.info(f"Quote request {quote_id} deleted by {actor.email}")
    return {"success": True}


async def find_unclaimed(store: Store, email: str) -> dict:
    email = normalize_email(email)
    quotes = await store.find(
        "quote_requests", {"email": email, "user_id": None}, sort=[("created_at", -1)]
    )
    summaries = [{k: q.get(k) for k in CLAIM_SUMMARY_FIELDS} for q in quotes]
    return {"success": True, "quotes": summaries, "count": len(summaries)}


async def claim_quotes(store: Store, actor: Actor, email: str) -> dict:
    """
    Assign every ownerless quote submitted with `email` to the actor.

    Claiming again once nothing is left returns claimed_count=0, not an error.
    """
    email = normalize_email(email)
    unclaimed = await store.find("quote_requests", {"email": email, "user_id": None})
    if not unclaimed:
        return {
            "success": True,
            "message": "No unclaimed quotes found for this email address",
            "claimed_count": 0,
            "quotes": [],
        }

    # Only rows that are still ownerless get reassigned
    claimed = await store.update_many(
        "quote_requests",
        {"email": email, "user_id": None},
        {"user_id": actor.id, "updated_at": utc_now()},
    )
    logger.info(f"{actor.email} claimed {claimed} quote(s) submitted by {email}")
    return {
        "success": True,
        "message": f"Successfully claimed {claimed} quote(s)",
        "claimed_count": claimed,
        "quotes": [{k: q.get(k) for k in CLAIM_SUMMARY_FIELDS[:4]} for q in unclaimed],
    }


async def get_accepted_quote(store: Store, quote_id: str) -> dict:
    quote = await get_quote_or_404(store, quote_id)
    if quote["status"] != QuoteStatus.accepted.value:
        raise ConflictError("Quote must be accepted first")
    return quote
