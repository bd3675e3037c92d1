"""
Enum classes for Fixing Maritime backend.
Defines all roles, status types and actions used throughout the system.
"""
from enum import Enum


class UserRole(str, Enum):
    customer = "customer"
    sub_admin = "sub_admin"
    admin = "admin"
    super_admin = "super_admin"


class UserStatusAction(str, Enum):
    activate = "activate"
    suspend = "suspend"


class QuoteStatus(str, Enum):
    pending = "pending"
    quoted = "quoted"
    accepted = "accepted"
    rejected = "rejected"
    completed = "completed"


class OrderStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    in_transit = "in_transit"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    unpaid = "unpaid"
    paid = "paid"


class TrackingStatus(str, Enum):
    order_placed = "order_placed"
    payment_confirmed = "payment_confirmed"
    processing = "processing"
    dispatched = "dispatched"
    in_transit = "in_transit"
    out_for_delivery = "out_for_delivery"
    delivered = "delivered"
    cancelled = "cancelled"


class InvoiceStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    overdue = "overdue"
    cancelled = "cancelled"


class RegistrationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    suspended = "suspended"


class TruckRequestStatus(str, Enum):
    pending = "pending"
    quoted = "quoted"
    confirmed = "confirmed"
    assigned = "assigned"
    in_transit = "in_transit"
    delivered = "delivered"
    cancelled = "cancelled"


class ContentSource(str, Enum):
    database = "database"
    alternate = "alternate"
    defaults = "defaults"
