"""
Email verification token store.

Tokens live behind a small key-value interface so the backing can be swapped:
process memory for demo mode, or the document store when one is configured.
Expired tokens are purged lazily on every access. Nothing here is durable
beyond what the chosen backend provides.
"""
from datetime import datetime, timedelta
from typing import Dict, Optional
import secrets
import logging

from config import VERIFICATION_TOKEN_HOURS
from database import Store
from utils.helpers import utc_now

logger = logging.getLogger(__name__)


class VerificationTokenStore:
    async def put(self, token: str, email: str, expires: datetime):
        raise NotImplementedError

    async def get(self, token: str) -> Optional[dict]:
        raise NotImplementedError

    async def delete(self, token: str):
        raise NotImplementedError

    async def delete_for_email(self, email: str):
        raise NotImplementedError

    async def purge_expired(self):
        raise NotImplementedError

    # ---- operations shared by every backend ----

    async def issue(self, email: str) -> str:
        """Create a fresh token for `email`, replacing any outstanding ones."""
        await self.purge_expired()
        await self.delete_for_email(email)
        token = secrets.token_urlsafe(32)
        await self.put(token, email, utc_now() + timedelta(hours=VERIFICATION_TOKEN_HOURS))
        return token

    async def consume(self, token: str) -> Optional[str]:
        """Return the email for a live token and invalidate it; None if unknown or expired."""
        await self.purge_expired()
        record = await self.get(token)
        if not record:
            return None
        await self.delete(token)
        return record["email"]


class MemoryVerificationTokenStore(VerificationTokenStore):
    """Process-wide map, lost on restart."""

    def __init__(self):
        self._tokens: Dict[str, dict] = {}

    async def put(self, token, email, expires):
        self._tokens[token] = {"token": token, "email": email, "expires": expires}

    async def get(self, token):
        record = self._tokens.get(token)
        return dict(record) if record else None

    async def delete(self, token):
        self._tokens.pop(token, None)

    async def delete_for_email(self, email):
        for token in [t for t, r in self._tokens.items() if r["email"] == email]:
            del self._tokens[token]

    async def purge_expired(self):
        now = utc_now()
        for token in [t for t, r in self._tokens.items() if r["expires"] < now]:
            del self._tokens[token]


class StoreVerificationTokenStore(VerificationTokenStore):
    """Tokens kept in the `verification_tokens` collection of the document store."""

    def __init__(self, store: Store):
        self.store = store

    async def put(self, token, email, expires):
        await self.store.insert_one(
            "verification_tokens", {"token": token, "email": email, "expires": expires}
        )

    async def get(self, token):
        return await self.store.find_one("verification_tokens", {"token": token})

    async def delete(self, token):
        await self.store.delete_one("verification_tokens", {"token": token})

    async def delete_for_email(self, email):
        await self.store.delete_many("verification_tokens", {"email": email})

    async def purge_expired(self):
        now = utc_now()
        tokens = await self.store.find("verification_tokens")
        expired = [t["token"] for t in tokens if t["expires"] < now]
        if expired:
            removed = await self.store.delete_many(
                "verification_tokens", {"token": {"$in": expired}}
            )
            logger.info(f"Purged {removed} expired verification tokens")


def build_verification_store(store: Store) -> VerificationTokenStore:
    if store.demo:
        return MemoryVerificationTokenStore()
    return StoreVerificationTokenStore(store)
