"""
Shared dependencies for Fixing Maritime backend.
Contains dependency functions used across multiple routes.
"""
from fastapi import Request, Depends
from typing import Optional

from config import ADMIN_COOKIE_NAME, SESSION_COOKIE_NAME
from database import Store
from errors import AuthenticationError, DependencyUnavailableError
from models.schemas import Actor
from services.auth_service import verify_admin_token, verify_session_token
from services.verification_store import VerificationTokenStore


async def get_store(request: Request) -> Store:
    """
    Get the application's document store.

    Raises:
        DependencyUnavailableError: 503 if the store is missing or cannot be reached
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise DependencyUnavailableError()
    if not store.available and not await store.ping():
        raise DependencyUnavailableError()
    return store


def get_verification_store(request: Request) -> VerificationTokenStore:
    return request.app.state.verification_store


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return None


async def get_current_admin(request: Request) -> Actor:
    """
    Get the admin actor from the admin-token cookie.

    Raises:
        AuthenticationError: 401 if the cookie is missing, invalid, expired,
            or carries a role that may not use the admin track
    """
    actor = verify_admin_token(request.cookies.get(ADMIN_COOKIE_NAME))
    if actor is None:
        raise AuthenticationError("Not authenticated")
    return actor


async def get_optional_customer(request: Request) -> Optional[Actor]:
    """Customer actor from the session cookie or a Bearer header, if any."""
    # Try cookie first
    token = request.cookies.get(SESSION_COOKIE_NAME)

    # Fallback to Authorization header
    if not token:
        token = _bearer_token(request)

    return verify_session_token(token)


async def get_current_customer(actor: Optional[Actor] = Depends(get_optional_customer)) -> Actor:
    if actor is None:
        raise AuthenticationError("Not authenticated")
    return actor
