"""
Pydantic model schemas for Fixing Maritime backend.
Defines all data validation models used in API requests, responses and stored documents.
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import List, Optional
from datetime import datetime, timezone
import uuid

from models.enums import (
    UserRole, QuoteStatus, OrderStatus, PaymentStatus, InvoiceStatus,
    RegistrationStatus, TruckRequestStatus
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


class Document(BaseModel):
    """Base for persisted records: string id plus timestamps."""
    model_config = ConfigDict(extra="ignore", use_enum_values=True)
    id: str = Field(default_factory=_uuid)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


# ============ AUTH ============

class Actor(BaseModel):
    """Authenticated identity behind a request, from either token track."""
    id: str
    email: str
    role: str
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignupRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8)
    company: Optional[str] = None
    phone: Optional[str] = None


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1)


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


# ============ USERS ============

class UserBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    company: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(min_length=8)
    role: UserRole = UserRole.customer
    email_verified: bool = False


class AdminCreate(UserBase):
    password: str = Field(min_length=8)
    role: UserRole = UserRole.admin
    email_verified: bool = True


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    company: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    role: Optional[UserRole] = None
    email_verified: Optional[bool] = None


class UserStatusUpdate(BaseModel):
    action: str


class RemoveAdminRequest(BaseModel):
    user_id: str = Field(min_length=1)


class User(Document):
    name: Optional[str] = None
    email: str
    password_hash: Optional[str] = None
    role: UserRole = UserRole.customer
    email_verified: bool = False
    company: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


# ============ QUOTE REQUESTS ============

class QuoteRequestCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    company: Optional[str] = None
    service_id: str = Field(min_length=1)
    service_name: str = Field(min_length=1)
    project_description: str = Field(min_length=1)
    timeline: Optional[str] = None
    budget: Optional[str] = None


class QuoteRequestUpdate(BaseModel):
    status: Optional[str] = None
    admin_response: Optional[str] = None
    quoted_amount: Optional[float] = Field(default=None, ge=0)
    quoted_currency: str = "USD"


class ClaimRequest(BaseModel):
    email: str = Field(min_length=1)


class QuoteRequest(Document):
    user_id: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    service_id: str
    service_name: str
    project_description: str
    timeline: Optional[str] = None
    budget: Optional[str] = None
    status: QuoteStatus = QuoteStatus.pending
    quoted_amount: Optional[float] = None
    quoted_currency: Optional[str] = None
    admin_response: Optional[str] = None
    responded_by: Optional[str] = None
    responded_at: Optional[datetime] = None


# ============ ORDERS ============

class OrderCreate(BaseModel):
    user_id: Optional[str] = None
    customer_email: Optional[EmailStr] = None
    customer_name: Optional[str] = None
    service_id: Optional[str] = None
    service_name: str = Field(min_length=1)
    description: Optional[str] = None
    amount: float = Field(ge=0)
    currency: str = "NGN"


class OrderFromQuote(BaseModel):
    quote_request_id: str = Field(min_length=1)


class TrackingEventCreate(BaseModel):
    status: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: Optional[str] = None
    remarks: Optional[str] = None


class Order(Document):
    order_number: str
    tracking_number: str
    user_id: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    service_id: Optional[str] = None
    service_name: str
    description: Optional[str] = None
    quote_request_id: Optional[str] = None
    amount: float
    currency: str
    status: OrderStatus = OrderStatus.pending
    payment_status: PaymentStatus = PaymentStatus.unpaid
    paid_at: Optional[datetime] = None
    created_by: Optional[str] = None


class TrackingEvent(Document):
    order_id: str
    status: str
    title: str
    description: str
    location: Optional[str] = None
    remarks: Optional[str] = None
    updated_by: Optional[str] = None


# ============ INVOICES ============

class InvoiceCreate(BaseModel):
    customer_id: Optional[str] = None
    customer_name: str = Field(min_length=1)
    customer_email: EmailStr
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    service_id: Optional[str] = None
    service_name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    amount: float = Field(ge=0)
    tax: float = Field(default=0, ge=0)
    currency: Optional[str] = None
    due_date: Optional[datetime] = None
    notes: Optional[str] = None
    items: Optional[List[dict]] = None
    order_id: Optional[str] = None


class InvoiceFromQuote(BaseModel):
    quote_request_id: str = Field(min_length=1)


class InvoiceUpdate(BaseModel):
    status: Optional[str] = None
    payment_method: Optional[str] = None
    payment_ref: Optional[str] = None
    notes: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    tax: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[datetime] = None


class Invoice(Document):
    invoice_number: str
    customer_id: Optional[str] = None
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    service_id: Optional[str] = None
    service_name: str
    description: str
    amount: float
    tax: float = 0
    total: float
    currency: str
    status: InvoiceStatus = InvoiceStatus.pending
    due_date: datetime
    notes: Optional[str] = None
    items: Optional[List[dict]] = None
    order_id: Optional[str] = None
    quote_request_id: Optional[str] = None
    created_by: Optional[str] = None
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_ref: Optional[str] = None


# ============ REGISTRATIONS ============

class RegistrationStatusUpdate(BaseModel):
    status: str
    review_notes: Optional[str] = None


class TruckRegistrationCreate(BaseModel):
    # Owner
    owner_name: str = Field(min_length=1)
    email: EmailStr
    mobile_phone: str = Field(min_length=1)
    home_address: str = Field(min_length=1)
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    # Business
    company_name: str = Field(min_length=1)
    business_type: str = Field(min_length=1)
    office_garage_address: Optional[str] = None
    tax_id: Optional[str] = None
    years_in_business: str = Field(min_length=1)
    are_you_owner: Optional[str] = None
    connection_to_trucks: Optional[str] = None
    position_in_company: str = Field(min_length=1)
    # Next of kin
    next_of_kin_name: str = Field(min_length=1)
    next_of_kin_address: str = Field(min_length=1)
    next_of_kin_phone: str = Field(min_length=1)
    next_of_kin_relationship: str = Field(min_length=1)
    # Bank
    bank_name: str = Field(min_length=1)
    account_number: str = Field(min_length=1)
    account_name: str = Field(min_length=1)
    # Truck
    truck_make: str = Field(min_length=1)
    truck_model: str = Field(min_length=1)
    truck_year: int = Field(ge=1950, le=2100)
    plate_number: str = Field(min_length=1)
    vin_number: Optional[str] = None
    truck_type: str = Field(min_length=1)
    capacity: Optional[str] = None
    # Insurance and documents
    insurance_provider: str = Field(min_length=1)
    insurance_expiry: datetime
    license_expiry: datetime
    national_id_card: str = Field(min_length=1)
    utility_bill: str = Field(min_length=1)
    vehicle_license: str = Field(min_length=1)
    proof_of_ownership: str = Field(min_length=1)
    hackney_permit: str = Field(min_length=1)
    road_worthiness: str = Field(min_length=1)
    # Operations
    service_areas: List[str] = Field(min_length=1)
    experience: str = Field(min_length=1)
    specializations: List[str] = Field(default_factory=list)
    additional_notes: Optional[str] = None
    agreed_to_terms: bool
    agreed_to_privacy: bool


class PartnerRegistrationCreate(BaseModel):
    company_name: str = Field(min_length=1)
    owner_name: str = Field(min_length=1)
    email: EmailStr
    phone_number: str = Field(min_length=1)
    home_address: str = Field(min_length=1)
    office_warehouse_address: str = Field(min_length=1)
    bank_name: str = Field(min_length=1)
    account_number: str = Field(min_length=1)
    account_name: str = Field(min_length=1)
    next_of_kin_name: str = Field(min_length=1)
    next_of_kin_relationship: str = Field(min_length=1)
    next_of_kin_address: str = Field(min_length=1)
    next_of_kin_phone: str = Field(min_length=1)
    national_id_card: str = Field(min_length=1)
    utility_bill: str = Field(min_length=1)
    cac_registration: str = Field(min_length=1)
    other_documents: Optional[str] = None
    agreed_to_terms: bool
    agreed_to_privacy: bool


class Registration(Document):
    model_config = ConfigDict(extra="allow", use_enum_values=True)
    email: str
    status: RegistrationStatus = RegistrationStatus.pending
    review_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None


# ============ TRUCK REQUESTS ============

class TruckRequestCreate(BaseModel):
    company_name: str = Field(min_length=1)
    contact_name: str = Field(min_length=1)
    email: EmailStr
    phone_number: str = Field(min_length=1)
    pickup_address: str = Field(min_length=1)
    pickup_city: Optional[str] = None
    pickup_date: datetime
    delivery_address: str = Field(min_length=1)
    delivery_city: Optional[str] = None
    delivery_date: datetime
    cargo_type: str = Field(min_length=1)
    cargo_weight: str = Field(min_length=1)
    cargo_value: str = Field(min_length=1)
    special_instructions: Optional[str] = ""
    service_type: str = Field(min_length=1)
    urgency: str = Field(min_length=1)


class TruckRequestUpdate(BaseModel):
    status: str
    quoted_amount: Optional[float] = Field(default=None, ge=0)
    quoted_currency: Optional[str] = None
    assigned_truck_id: Optional[str] = None


class TruckRequest(Document):
    model_config = ConfigDict(extra="allow", use_enum_values=True)
    tracking_number: str
    user_id: Optional[str] = None
    email: str
    status: TruckRequestStatus = TruckRequestStatus.pending
    quoted_amount: Optional[float] = None
    quoted_currency: Optional[str] = None
    assigned_truck_id: Optional[str] = None


# ============ CONTENT ============

class ContentSectionUpdate(BaseModel):
    type: str = Field(min_length=1)
    name: Optional[str] = None
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    active: bool = True


class SeoUpdate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    keywords: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None


# ============ SERVICE CATALOGUE ============

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    base_price: Optional[float] = Field(default=None, ge=0)
    price_unit: Optional[str] = None
    features: List[str] = []
    active: bool = True


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    base_price: Optional[float] = Field(default=None, ge=0)
    price_unit: Optional[str] = None
    features: Optional[List[str]] = None
    active: Optional[bool] = None


class Service(Document):
    name: str
    slug: str
    description: Optional[str] = None
    base_price: Optional[float] = None
    price_unit: Optional[str] = None
    features: List[str] = []
    active: bool = True
