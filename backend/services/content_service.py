"""
Site content resolution for Fixing Maritime backend.

Public content is answered by the first stage that can:
1. the primary store (content_sections / seo_settings)
2. an alternate REST datastore, when CONTENT_FALLBACK_URL is configured
3. built-in defaults

A failing stage is logged and skipped. Callers always get content plus a
`source` tag naming the stage that answered.
"""
from typing import Dict, Optional, Tuple
import logging
import uuid

import httpx

from config import CONTENT_FALLBACK_URL, CONTENT_FALLBACK_KEY, CONTENT_FALLBACK_TIMEOUT
from database import Store
from errors import AppError
from models.enums import ContentSource
from models.schemas import Actor, ContentSectionUpdate, SeoUpdate
from utils.helpers import utc_now

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS: Dict[str, dict] = {
    "hero": {
        "name": "Hero Section",
        "title": "Your Gateway to Global Maritime Solutions",
        "content": "Professional maritime services with real-time tracking and comprehensive logistics support.",
    },
    "about": {
        "name": "About Section",
        "title": "Leading Maritime Service Provider",
        "content": "With years of experience in the maritime industry, we provide comprehensive solutions for all your maritime needs.",
    },
    "services": {
        "name": "Services Section",
        "title": "Comprehensive Maritime Services",
        "content": "We offer a complete suite of maritime services designed to streamline your logistics operations.",
    },
    "contact": {
        "name": "Contact Section",
        "title": "Get in Touch",
        "content": "Ready to streamline your maritime operations? Contact our expert team today.",
    },
    "footer": {
        "name": "Footer",
        "title": "Fixing Maritime",
        "content": "Your comprehensive maritime solutions partner trusted worldwide.",
    },
}

DEFAULT_SEO = {
    "title": "Fixing Maritime - Professional Maritime Services",
    "description": (
        "Complete maritime solutions including documentation, truck services, tug boat with barge, "
        "procurement, freight forwarding, warehousing, and custom clearing."
    ),
    "keywords": (
        "maritime services, freight forwarding, custom clearing, tug boat, barge, "
        "warehousing, procurement, export goods"
    ),
    "og_title": "Fixing Maritime - Professional Maritime Services",
    "og_description": "Your trusted partner for comprehensive maritime solutions",
}

SEO_FIELDS = ("title", "description", "keywords", "og_title", "og_description")


def _sections_map(rows) -> Dict[str, dict]:
    return {
        row["type"]: {
            "id": row.get("id"),
            "name": row.get("name"),
            "title": row.get("title"),
            "content": row.get("content"),
        }
        for row in rows
        if row.get("type") and row.get("active", True)
    }


def _seo_view(row: Optional[dict]) -> dict:
    if not row:
        return dict(DEFAULT_SEO)
    return {field: row.get(field) for field in SEO_FIELDS}


async def _from_store(store: Optional[Store]) -> Optional[Tuple[dict, dict]]:
    if store is None:
        return None
    try:
        rows = await store.find("content_sections", {"active": True})
        if not rows:
            return None
        seo = await store.find_one("seo_settings", {"active": True})
        return _sections_map(rows), _seo_view(seo)
    except AppError as e:
        logger.warning(f"Content store unavailable, trying alternate source: {e.message}")
    except Exception as e:
        logger.warning(f"Content store query failed, trying alternate source: {e!r}")
    return None


async def _from_alternate() -> Optional[Tuple[dict, dict]]:
    if not CONTENT_FALLBACK_URL or not CONTENT_FALLBACK_KEY:
        return None

    headers = {
        "apikey": CONTENT_FALLBACK_KEY,
        "Authorization": f"Bearer {CONTENT_FALLBACK_KEY}",
    }
    try:
        async with httpx.AsyncClient(
            base_url=CONTENT_FALLBACK_URL, headers=headers, timeout=CONTENT_FALLBACK_TIMEOUT
        ) as client:
            sections_resp = await client.get(
                "/rest/v1/content_sections", params={"select": "*", "active": "eq.true"}
            )
            sections_resp.raise_for_status()
            seo_resp = await client.get(
                "/rest/v1/seo_settings", params={"select": "*", "active": "eq.true", "limit": 1}
            )
            seo_rows = seo_resp.json() if seo_resp.status_code == 200 else []
            rows = sections_resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Alternate content source failed: {e}")
        return None

    if not isinstance(rows, list) or not rows:
        logger.warning("Alternate content source returned no sections")
        return None
    seo = seo_rows[0] if isinstance(seo_rows, list) and seo_rows else None
    try:
        return _sections_map(rows), _seo_view(seo)
    except (AttributeError, TypeError) as e:
        logger.warning(f"Alternate content source returned malformed rows: {e}")
        return None


def default_content() -> dict:
    return {
        "sections": {key: {"title": s["title"], "content": s["content"]} for key, s in DEFAULT_SECTIONS.items()},
        "seo": dict(DEFAULT_SEO),
        "source": ContentSource.defaults.value,
    }


async def resolve_content(store: Optional[Store]) -> dict:
    """Resolve public page content. Never raises for a missing or failing source."""
    found = await _from_store(store)
    if found:
        sections, seo = found
        return {"sections": sections, "seo": seo, "source": ContentSource.database.value}

    found = await _from_alternate()
    if found:
        sections, seo = found
        return {"sections": sections, "seo": seo, "source": ContentSource.alternate.value}

    return default_content()


# ============ ADMIN ============

async def upsert_section(store: Store, actor: Actor, data: ContentSectionUpdate) -> dict:
    existing = await store.find_one("content_sections", {"type": data.type})
    values = data.model_dump()
    values["name"] = values.get("name") or (existing or {}).get("name") or data.type.title()
    values["updated_at"] = utc_now()
    values["updated_by"] = actor.id

    if existing:
        section = await store.update_one("content_sections", {"type": data.type}, values)
    else:
        values["created_at"] = values["updated_at"]
        section = await store.insert_one("content_sections", {"id": str(uuid.uuid4()), **values})
    logger.info(f"Content section '{data.type}' saved by {actor.email}")
    return section


async def update_seo(store: Store, actor: Actor, data: SeoUpdate) -> dict:
    values = {**data.model_dump(), "active": True, "updated_at": utc_now(), "updated_by": actor.id}
    existing = await store.find_one("seo_settings", {"active": True})
    if existing:
        seo = await store.update_one("seo_settings", {"id": existing["id"]}, values)
    else:
        seo = await store.insert_one("seo_settings", {"id": str(uuid.uuid4()), "created_at": values["updated_at"], **values})
    logger.info(f"SEO settings updated by {actor.email}")
    return seo


async def seed_default_content(store: Store) -> dict:
    """Insert any missing default sections and SEO settings. Existing rows are left alone."""
    created = []
    now = utc_now()
    for section_type, section in DEFAULT_SECTIONS.items():
        if await store.find_one("content_sections", {"type": section_type}):
            continue
        await store.insert_one("content_sections", {
            "id": str(uuid.uuid4()),
            "type": section_type,
            **section,
            "active": True,
            "created_at": now,
            "updated_at": now,
        })
        created.append(section_type)

    seo_created = False
    if not await store.find_one("seo_settings", {"active": True}):
        await store.insert_one("seo_settings", {
            "id": str(uuid.uuid4()), **DEFAULT_SEO, "active": True, "created_at": now, "updated_at": now,
        })
        seo_created = True

    if created or seo_created:
        logger.info(f"Seeded default content sections: {created or 'none'}, seo: {seo_created}")
    return {"success": True, "sections_created": created, "seo_created": seo_created}
