"""
Authentication service for Fixing Maritime backend.
Password hashing plus the two signed-token tracks: admin sessions and customer sessions.
"""
from datetime import datetime, timezone, timedelta
from typing import Optional
import logging

import bcrypt
import jwt

from config import (
    JWT_SECRET, JWT_ALGORITHM, ADMIN_TOKEN_HOURS, SESSION_DAYS, BCRYPT_ROUNDS
)
from database import Store
from errors import ValidationError, AuthenticationError, AuthorizationError
from models.enums import UserRole
from models.schemas import Actor
from services.policy import ADMIN_LOGIN_ROLES

logger = logging.getLogger(__name__)

# Audience claim per login track
ADMIN_AUDIENCE = "admin"
SESSION_AUDIENCE = "session"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Verify a password against its hash"""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def _encode(user: dict, lifetime: timedelta, audience: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "aud": audience,
        "id": user["id"],
        "email": user["email"],
        "role": user["role"],
        "name": user.get("name"),
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def _decode(token: str, audience: str) -> Optional[Actor]:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM], audience=audience)
        return Actor(
            id=payload["id"],
            email=payload["email"],
            role=payload["role"],
            name=payload.get("name"),
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
    except jwt.InvalidAudienceError:
        logger.warning(f"Rejected token issued for another track (expected {audience})")
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        logger.info("Rejected malformed or tampered token")
    return None


# ============ ADMIN TRACK ============

def create_admin_token(user: dict) -> str:
    return _encode(user, timedelta(hours=ADMIN_TOKEN_HOURS), ADMIN_AUDIENCE)


def verify_admin_token(token: Optional[str]) -> Optional[Actor]:
    """Decode an admin token; None on any failure or a non-admin role."""
    if not token:
        return None
    actor = _decode(token, ADMIN_AUDIENCE)
    if actor is None or actor.role not in ADMIN_LOGIN_ROLES:
        return None
    return actor


async def authenticate_admin(store: Store, email: Optional[str], password: Optional[str]) -> dict:
    """Validate admin credentials and return the user document."""
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await store.find_one("users", {"email": email.strip().lower()})
    if not user or not user.get("password_hash"):
        logger.warning(f"Admin login failed: unknown user {email}")
        raise AuthenticationError("Invalid credentials")

    if not verify_password(password, user["password_hash"]):
        logger.warning(f"Admin login failed: invalid password for {email}")
        raise AuthenticationError("Invalid credentials")

    if user.get("role") not in ADMIN_LOGIN_ROLES:
        logger.warning(f"Admin login refused for non-admin {email}")
        raise AuthorizationError("Access denied. Admin privileges required.")

    if not user.get("email_verified"):
        raise AuthorizationError("Please verify your email address first")

    return user


# ============ CUSTOMER TRACK ============

def create_session_token(user: dict) -> str:
    return _encode(user, timedelta(days=SESSION_DAYS), SESSION_AUDIENCE)


def verify_session_token(token: Optional[str]) -> Optional[Actor]:
    if not token:
        return None
    actor = _decode(token, SESSION_AUDIENCE)
    if actor is None:
        return None
    # Unknown roles never grant anything beyond a customer
    if actor.role not in [role.value for role in UserRole]:
        actor.role = UserRole.customer.value
    return actor


async def authenticate_customer(store: Store, email: Optional[str], password: Optional[str]) -> dict:
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await store.find_one("users", {"email": email.strip().lower()})
    if not user or not verify_password(password, user.get("password_hash")):
        logger.warning(f"Login failed for email {email}")
        raise AuthenticationError("Invalid email or password")

    if not user.get("email_verified"):
        raise AuthorizationError("Please verify your email address first")

    return user
