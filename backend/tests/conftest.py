"""
Shared fixtures for the Fixing Maritime backend tests.

Every test gets a fresh in-memory store wired into the app, so no database
is needed. Auth helpers mint tokens directly instead of logging in.
"""
import os

# Must be set before config is imported
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MONGO_URL"] = ""
os.environ["CONTENT_FALLBACK_URL"] = ""
os.environ["CONTENT_FALLBACK_KEY"] = ""
os.environ["JWT_SECRET"] = "test-secret"
os.environ["APP_ENV"] = "test"

import asyncio
import uuid

import pytest
from fastapi.testclient import TestClient

from database import MemoryStore
from main import app
from models.schemas import User
from services.auth_service import create_admin_token, create_session_token, hash_password

DEFAULT_PASSWORD = "password123"


def run(coro):
    """Run a coroutine to completion from a sync test"""
    return asyncio.run(coro)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    app.state.store = store
    with TestClient(app) as test_client:
        yield test_client
    app.state.store = None


@pytest.fixture
def make_user(store):
    """Insert a user straight into the store and return the document"""
    def _make(role="customer", email=None, verified=True, password=DEFAULT_PASSWORD, name=None):
        user = User(
            name=name or f"Test {role}",
            email=email or f"{role}-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password),
            role=role,
            email_verified=verified,
        )
        doc = user.model_dump()
        run(store.insert_one("users", doc))
        return doc
    return _make


@pytest.fixture
def super_admin(make_user):
    return make_user("super_admin", email="root@fixingmaritime.com")


@pytest.fixture
def admin(make_user):
    return make_user("admin", email="ops@fixingmaritime.com")


@pytest.fixture
def customer(make_user):
    return make_user("customer", email="buyer@example.com")


def admin_headers(user: dict) -> dict:
    """Cookie header carrying an admin token for `user`"""
    return {"Cookie": f"admin-token={create_admin_token(user)}"}


def customer_headers(user: dict) -> dict:
    """Bearer header carrying a session token for `user`"""
    return {"Authorization": f"Bearer {create_session_token(user)}"}


@pytest.fixture
def as_admin(admin):
    return admin_headers(admin)


@pytest.fixture
def as_super(super_admin):
    return admin_headers(super_admin)


@pytest.fixture
def as_customer(customer):
    return customer_headers(customer)


QUOTE_PAYLOAD = {
    "name": "Ada Obi",
    "email": "ada@example.com",
    "phone": "+2348000000000",
    "company": "Obi Shipping",
    "service_id": "freight-forwarding",
    "service_name": "Freight Forwarding",
    "project_description": "Two containers from Lagos to Rotterdam",
    "timeline": "2 weeks",
}


@pytest.fixture
def accepted_quote(client, as_admin):
    """A quote walked through pending -> quoted -> accepted with a 1000 USD quote"""
    quote = client.post("/api/quote-requests", json=QUOTE_PAYLOAD).json()["quote_request"]
    client.put(
        f"/api/admin/quote-requests/{quote['id']}",
        json={"status": "quoted", "quoted_amount": 1000, "quoted_currency": "USD"},
        headers=as_admin,
    )
    response = client.put(
        f"/api/admin/quote-requests/{quote['id']}", json={"status": "accepted"}, headers=as_admin
    )
    assert response.status_code == 200, response.text
    return response.json()["quote_request"]


@pytest.fixture
def password():
    return DEFAULT_PASSWORD


@pytest.fixture
def headers_for():
    """Build auth headers for any user: headers_for(user) or headers_for(user, admin=False)"""
    def _headers(user, admin=True):
        return admin_headers(user) if admin else customer_headers(user)
    return _headers
