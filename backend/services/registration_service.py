"""
Truck owner and partner registrations for Fixing Maritime backend.
Public submission followed by admin review.
"""
from typing import List, Optional
import logging

from database import Store
from errors import ConflictError, NotFoundError, ValidationError
from models.schemas import (
    Actor, PartnerRegistrationCreate, Registration, RegistrationStatusUpdate,
    TruckRegistrationCreate
)
from services.transitions import REGISTRATION_TRANSITIONS
from utils.helpers import normalize_email, utc_now

logger = logging.getLogger(__name__)

TRUCK = "truck_registrations"
PARTNER = "partner_registrations"

LABELS = {TRUCK: "Truck registration", PARTNER: "Partner registration"}


def _check_agreements(data) -> None:
    if not data.agreed_to_terms:
        raise ValidationError("You must agree to the terms and conditions")
    if not data.agreed_to_privacy:
        raise ValidationError("You must agree to the privacy policy")


async def submit_truck_registration(store: Store, data: TruckRegistrationCreate) -> dict:
    _check_agreements(data)
    email = normalize_email(data.email)
    plate_number = data.plate_number.strip().upper()

    existing = await store.find_one(
        TRUCK, {"$or": [{"email": email}, {"plate_number": plate_number}]}
    )
    if existing:
        raise ConflictError("A truck with this email or plate number is already registered")

    registration = Registration(
        **data.model_dump(exclude={"email", "plate_number"}),
        email=email,
        plate_number=plate_number,
    )
    doc = await store.insert_one(TRUCK, registration.model_dump())
    logger.info(f"Truck registration {registration.id} submitted for plate {plate_number}")
    return {"message": "Registration submitted successfully", "registration_id": doc["id"]}


async def submit_partner_registration(store: Store, data: PartnerRegistrationCreate) -> dict:
    _check_agreements(data)
    email = normalize_email(data.email)

    if await store.find_one(PARTNER, {"email": email}):
        raise ConflictError("A partner with this email is already registered")

    registration = Registration(**data.model_dump(exclude={"email"}), email=email)
    doc = await store.insert_one(PARTNER, registration.model_dump())
    logger.info(f"Partner registration {registration.id} submitted for {data.company_name}")
    return {"message": "Partner registration submitted successfully", "registration_id": doc["id"]}


async def get_registration_or_404(store: Store, collection: str, registration_id: str) -> dict:
    registration = await store.find_one(collection, {"id": registration_id})
    if not registration:
        raise NotFoundError(f"{LABELS[collection]} not found")
    return registration


async def list_registrations(store: Store, collection: str, status: Optional[str] = None) -> List[dict]:
    query = {}
    if status:
        query["status"] = REGISTRATION_TRANSITIONS.validate(status)
    return await store.find(collection, query, sort=[("created_at", -1)])


async def review_registration(
    store: Store, actor: Actor, collection: str, registration_id: str, data: RegistrationStatusUpdate
) -> dict:
    """Move a registration through review; the reviewer and notes land in the same write."""
    registration = await get_registration_or_404(store, collection, registration_id)
    if not REGISTRATION_TRANSITIONS.check(registration["status"], data.status):
        return registration

    now = utc_now()
    updated = await store.update_one(collection, {"id": registration_id}, {
        "status": data.status,
        "review_notes": data.review_notes,
        "reviewed_by": actor.id,
        "reviewed_at": now,
        "updated_at": now,
    })
    logger.info(
        f"{LABELS[collection]} {registration_id} {registration['status']} -> {data.status} by {actor.email}"
    )
    return updated


async def delete_registration(store: Store, actor: Actor, collection: str, registration_id: str) -> dict:
    await get_registration_or_404(store, collection, registration_id)
    await store.delete_one(collection, {"id": registration_id})
    logger.info(f"{LABELS[collection]} {registration_id} deleted by {actor.email}")
    return {"success": True, "message": f"{LABELS[collection]} deleted successfully"}
