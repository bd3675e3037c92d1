"""
Utility helper functions for Fixing Maritime backend.
Contains shared helpers for timestamps, email handling, due dates and response shaping.
"""
import re
from typing import Optional
from datetime import datetime, timezone, timedelta

from errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Never leave the service in a response
PRIVATE_USER_FIELDS = ("password_hash",)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: Optional[str]) -> str:
    """
    Lower-case and trim an email, validating its shape.

    Raises:
        ValidationError: if the email is missing or malformed
    """
    if not email or not email.strip():
        raise ValidationError("Email is required")
    email = email.strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email


def calculate_due_date(payment_terms_days: int) -> datetime:
    """
    Calculate due date from today + payment terms.

    Args:
        payment_terms_days: Number of days until payment is due

    Returns:
        Due date as a UTC datetime
    """
    return utc_now() + timedelta(days=payment_terms_days)


def public_user(user: Optional[dict]) -> Optional[dict]:
    """Strip credentials and add the derived active/inactive status."""
    if user is None:
        return None
    cleaned = {k: v for k, v in user.items() if k not in PRIVATE_USER_FIELDS}
    cleaned["status"] = "active" if user.get("email_verified") else "inactive"
    return cleaned


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total_count": total,
        "total_pages": (total + limit - 1) // limit if limit else 0,
    }
