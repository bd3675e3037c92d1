"""
Service catalogue for Fixing Maritime backend.

The services customers can request quotes for. Admins manage the catalogue;
the public listing shows active services and falls back to the built-in
catalogue when the store has none or cannot be read.
"""
from typing import List, Optional
import logging

from database import Store
from errors import AppError, ConflictError, NotFoundError
from models.enums import ContentSource
from models.schemas import Actor, Service, ServiceCreate, ServiceUpdate
from utils.helpers import utc_now

logger = logging.getLogger(__name__)

PUBLIC_FEATURE_LIMIT = 3

DEFAULT_SERVICES: List[dict] = [
    {
        "slug": "documentation",
        "name": "Documentation Services",
        "description": (
            "Complete maritime documentation and paperwork services including Bills of Lading, "
            "Certificates of Origin, Commercial Invoices, and all necessary customs documentation."
        ),
        "base_price": 350.0,
        "price_unit": "per_shipment",
        "features": [
            "Bill of Lading preparation", "Certificate of Origin", "Commercial Invoice",
            "Packing List", "Insurance certificates", "Customs declarations",
        ],
    },
    {
        "slug": "truck-services",
        "name": "Truck Services",
        "description": (
            "Reliable ground transportation for cargo delivery to and from ports with real-time "
            "GPS tracking and professional drivers."
        ),
        "base_price": 2.5,
        "price_unit": "per_mile",
        "features": [
            "Local and long-distance transport", "Real-time GPS tracking",
            "Temperature-controlled options", "Door-to-door delivery",
        ],
    },
    {
        "slug": "tugboat-barge",
        "name": "Tug Boat with Barge",
        "description": (
            "Professional tug boat and barge services for safe and efficient marine transportation "
            "of heavy cargo and bulk materials."
        ),
        "base_price": 5000.0,
        "price_unit": "per_trip",
        "features": [
            "Heavy machinery transport", "Bulk cargo handling", "Experienced marine crew",
            "Harbor towing services",
        ],
    },
    {
        "slug": "procurement",
        "name": "Procurement of Export Goods",
        "description": (
            "Expert procurement services for international export with global supplier network, "
            "quality assurance, and competitive pricing."
        ),
        "base_price": 2500.0,
        "price_unit": "per_order",
        "features": [
            "Global supplier network", "Quality assurance", "Competitive pricing", "Vendor management",
        ],
    },
    {
        "slug": "freight-forwarding",
        "name": "Freight Forwarding",
        "description": (
            "Comprehensive freight forwarding solutions with global reach, customs clearance, "
            "and end-to-end shipment tracking."
        ),
        "base_price": 650.0,
        "price_unit": "per_shipment",
        "features": [
            "Air and sea freight", "Customs clearance", "Multi-modal transport", "End-to-end tracking",
        ],
    },
    {
        "slug": "warehousing",
        "name": "Warehousing",
        "description": (
            "Secure, climate-controlled warehousing facilities with advanced inventory management "
            "systems and flexible storage options."
        ),
        "base_price": 125.0,
        "price_unit": "per_month",
        "features": [
            "Climate-controlled storage", "Inventory management", "Pick and pack services",
            "Cross-docking services",
        ],
    },
    {
        "slug": "custom-clearing",
        "name": "Custom Clearing",
        "description": (
            "Expert customs clearance and compliance services ensuring smooth import/export "
            "operations with regulatory expertise."
        ),
        "base_price": 250.0,
        "price_unit": "per_clearance",
        "features": [
            "Import/export clearance", "Duty calculation", "Tariff classification", "Audit support",
        ],
    },
]


def _public_view(service: dict) -> dict:
    slug = service["slug"]
    return {
        "id": service.get("id") or slug,
        "slug": slug,
        "name": service["name"],
        "description": service.get("description"),
        "features": list(service.get("features") or [])[:PUBLIC_FEATURE_LIMIT],
        "href": f"/services/{slug}",
    }


async def _get_or_404(store: Store, service_id: str) -> dict:
    service = await store.find_one("services", {"id": service_id})
    if not service:
        raise NotFoundError("Service not found")
    return service


async def _ensure_slug_free(store: Store, slug: str, service_id: Optional[str] = None):
    existing = await store.find_one("services", {"slug": slug})
    if existing and existing["id"] != service_id:
        raise ConflictError("A service with this slug already exists")


async def _request_count(store: Store, service: dict) -> int:
    # Quotes reference a service by id or by slug
    return await store.count(
        "quote_requests", {"service_id": {"$in": [service["id"], service["slug"]]}}
    )


# ============ PUBLIC ============

async def list_public_services(store: Optional[Store]) -> dict:
    """Active services for the public site. Never raises for a missing or failing store."""
    if store is not None:
        try:
            rows = await store.find("services", {"active": True}, sort=[("created_at", 1)])
            if rows:
                return {
                    "services": [_public_view(row) for row in rows],
                    "source": ContentSource.database.value,
                }
        except AppError as e:
            logger.warning(f"Service catalogue unavailable, serving defaults: {e.message}")
        except Exception as e:
            logger.warning(f"Service catalogue query failed, serving defaults: {e!r}")

    return {
        "services": [_public_view(service) for service in DEFAULT_SERVICES],
        "source": ContentSource.defaults.value,
    }


# ============ ADMIN ============

async def list_services(store: Store) -> List[dict]:
    services = await store.find("services", {}, sort=[("created_at", -1)])
    return [{**service, "requests": await _request_count(store, service)} for service in services]


async def get_service(store: Store, service_id: str) -> dict:
    service = await _get_or_404(store, service_id)
    return {**service, "requests": await _request_count(store, service)}


async def create_service(store: Store, actor: Actor, data: ServiceCreate) -> dict:
    await _ensure_slug_free(store, data.slug)
    service = Service(**data.model_dump())
    doc = await store.insert_one("services", service.model_dump())
    logger.info(f"Service '{service.slug}' created by {actor.email}")
    return doc


async def update_service(store: Store, actor: Actor, service_id: str, data: ServiceUpdate) -> dict:
    await _get_or_404(store, service_id)
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "slug" in changes:
        await _ensure_slug_free(store, changes["slug"], service_id)

    changes["updated_at"] = utc_now()
    service = await store.update_one("services", {"id": service_id}, changes)
    logger.info(f"Service {service_id} updated by {actor.email}: {sorted(k for k in changes if k != 'updated_at')}")
    return service


async def delete_service(store: Store, actor: Actor, service_id: str) -> dict:
    service = await _get_or_404(store, service_id)
    await store.delete_one("services", {"id": service_id})
    logger.info(f"Service '{service['slug']}' deleted by {actor.email}")
    return {"message": "Service deleted successfully"}


async def seed_default_services(store: Store) -> dict:
    """Insert the built-in catalogue into an empty services collection."""
    existing = await store.count("services")
    if existing > 0:
        return {"message": "Services already exist in database", "count": existing}

    created = []
    for entry in DEFAULT_SERVICES:
        doc = await store.insert_one("services", Service(**entry).model_dump())
        created.append(doc)
    logger.info(f"Seeded {len(created)} default services")
    return {"message": "Services seeded successfully", "count": len(created), "services": created}
