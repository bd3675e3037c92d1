"""
Models package for Fixing Maritime backend.
Exports all Enums for use throughout the application.
"""

# Export all enums
from models.enums import (
    UserRole,
    UserStatusAction,
    QuoteStatus,
    OrderStatus,
    PaymentStatus,
    TrackingStatus,
    InvoiceStatus,
    RegistrationStatus,
    TruckRequestStatus,
    ContentSource,
)

# Note: schemas are imported from models.schemas as needed
# to keep imports explicit

__all__ = [
    "UserRole",
    "UserStatusAction",
    "QuoteStatus",
    "OrderStatus",
    "PaymentStatus",
    "TrackingStatus",
    "InvoiceStatus",
    "RegistrationStatus",
    "TruckRequestStatus",
    "ContentSource",
]
