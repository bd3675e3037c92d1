"""
Database connection module for Fixing Maritime backend.

Every service talks to a Store: a small document-store capability with two
implementations. MongoStore wraps the motor async driver and is the source of
truth in production. MemoryStore keeps documents in process memory and backs
demo mode (no MONGO_URL configured) and the test suite.

Queries are plain equality dicts. The only operators used across the codebase
are `$in` on a field and a top-level `$or`, and both stores support exactly
those.
"""
import asyncio
import copy
import functools
import logging
from typing import Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from config import MONGO_URL, DB_NAME, DB_CONNECT_RETRIES
from errors import ConflictError, DependencyUnavailableError

logger = logging.getLogger(__name__)

Sort = Optional[List[Tuple[str, int]]]

# (collection, field) pairs that must stay unique
UNIQUE_FIELDS = [
    ("users", "id"),
    ("users", "email"),
    ("quote_requests", "id"),
    ("orders", "id"),
    ("orders", "order_number"),
    ("orders", "tracking_number"),
    ("tracking_events", "id"),
    ("invoices", "id"),
    ("invoices", "invoice_number"),
    ("truck_registrations", "id"),
    ("truck_registrations", "email"),
    ("truck_registrations", "plate_number"),
    ("partner_registrations", "id"),
    ("partner_registrations", "email"),
    ("truck_requests", "id"),
    ("truck_requests", "tracking_number"),
    ("content_sections", "type"),
    ("services", "id"),
    ("services", "slug"),
    ("verification_tokens", "token"),
    ("counters", "key"),
]


class Store:
    """Document store capability used by every service."""

    demo = False
    available = True

    async def ping(self) -> bool:
        raise NotImplementedError

    async def find_one(self, collection: str, query: dict) -> Optional[dict]:
        raise NotImplementedError

    async def find(
        self,
        collection: str,
        query: Optional[dict] = None,
        sort: Sort = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[dict]:
        raise NotImplementedError

    async def count(self, collection: str, query: Optional[dict] = None) -> int:
        raise NotImplementedError

    async def insert_one(self, collection: str, doc: dict) -> dict:
        raise NotImplementedError

    async def update_one(self, collection: str, query: dict, values: dict) -> Optional[dict]:
        """Set `values` on the first match and return the updated document."""
        raise NotImplementedError

    async def update_many(self, collection: str, query: dict, values: dict) -> int:
        raise NotImplementedError

    async def delete_one(self, collection: str, query: dict) -> bool:
        raise NotImplementedError

    async def delete_many(self, collection: str, query: dict) -> int:
        raise NotImplementedError

    async def next_sequence(self, key: str) -> int:
        """Atomically increment and return the counter named `key`."""
        raise NotImplementedError

    async def close(self):
        pass


# ============ MONGO ============

def _guarded(func):
    """Translate driver connectivity failures into a 503 and uniqueness failures into a 409."""
    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            result = await func(self, *args, **kwargs)
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key on {args[0] if args else '?'}: {e}")
            raise ConflictError("A record with these details already exists")
        except ConnectionFailure as e:
            self.available = False
            logger.error(f"Database unreachable: {e}")
            raise DependencyUnavailableError()
        self.available = True
        return result
    return wrapper


class MongoStore(Store):
    def __init__(self, url: str, db_name: str):
        self.client = AsyncIOMotorClient(url, serverSelectionTimeoutMS=5000, tz_aware=True)
        self.db = self.client[db_name]
        self.available = False

    async def ping(self) -> bool:
        try:
            await self.client.admin.command("ping")
            self.available = True
        except ConnectionFailure as e:
            logger.warning(f"Database ping failed: {e}")
            self.available = False
        return self.available

    async def connect(self, retries: int = DB_CONNECT_RETRIES):
        """Ping with exponential backoff (1s, 2s, 4s, ...) until the server answers."""
        for attempt in range(1, retries + 1):
            if await self.ping():
                logger.info("Database connected successfully")
                await self.ensure_indexes()
                return True
            if attempt == retries:
                break
            delay = 2 ** (attempt - 1)
            logger.info(f"Database connection attempt {attempt} failed, retrying in {delay}s...")
            await asyncio.sleep(delay)
        logger.error("Max retries reached. Requests will return 503 until the database is reachable.")
        return False

    async def ensure_indexes(self):
        for collection, field in UNIQUE_FIELDS:
            await self.db[collection].create_index(field, unique=True)

    @_guarded
    async def find_one(self, collection, query):
        return await self.db[collection].find_one(query, {"_id": 0})

    @_guarded
    async def find(self, collection, query=None, sort=None, skip=0, limit=0):
        cursor = self.db[collection].find(query or {}, {"_id": 0})
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [doc async for doc in cursor]

    @_guarded
    async def count(self, collection, query=None):
        return await self.db[collection].count_documents(query or {})

    @_guarded
    async def insert_one(self, collection, doc):
        await self.db[collection].insert_one(dict(doc))
        return doc

    @_guarded
    async def update_one(self, collection, query, values):
        return await self.db[collection].find_one_and_update(
            query,
            {"$set": values},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    @_guarded
    async def update_many(self, collection, query, values):
        result = await self.db[collection].update_many(query, {"$set": values})
        return result.modified_count

    @_guarded
    async def delete_one(self, collection, query):
        result = await self.db[collection].delete_one(query)
        return result.deleted_count > 0

    @_guarded
    async def delete_many(self, collection, query):
        result = await self.db[collection].delete_many(query)
        return result.deleted_count

    @_guarded
    async def next_sequence(self, key):
        counter_doc = await self.db.counters.find_one_and_update(
            {"key": key},
            {"$inc": {"value": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter_doc["value"]

    async def close(self):
        self.client.close()


# ============ MEMORY ============

def _matches(doc: dict, query: Optional[dict]) -> bool:
    for field, expected in (query or {}).items():
        if field == "$or":
            if not any(_matches(doc, clause) for clause in expected):
                return False
            continue
        actual = doc.get(field)
        if isinstance(expected, dict) and "$in" in expected:
            if actual not in expected["$in"]:
                return False
        elif actual != expected:
            return False
    return True


def _sort_key(field: str):
    # None sorts first ascending, as in MongoDB
    def key(doc):
        value = doc.get(field)
        return (value is not None, value)
    return key


class MemoryStore(Store):
    """In-process store for demo mode and tests. Lost on restart."""

    demo = True

    def __init__(self):
        self.collections: Dict[str, List[dict]] = {}
        self.counters: Dict[str, int] = {}

    def _docs(self, collection: str) -> List[dict]:
        return self.collections.setdefault(collection, [])

    def _check_unique(self, collection: str, doc: dict, ignore: Optional[dict] = None):
        for coll, field in UNIQUE_FIELDS:
            if coll != collection or doc.get(field) is None:
                continue
            for existing in self._docs(collection):
                if existing is ignore:
                    continue
                if existing.get(field) == doc.get(field):
                    raise ConflictError("A record with these details already exists")

    async def ping(self):
        return True

    async def find_one(self, collection, query):
        for doc in self._docs(collection):
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def find(self, collection, query=None, sort=None, skip=0, limit=0):
        docs = [doc for doc in self._docs(collection) if _matches(doc, query)]
        for field, direction in reversed(sort or []):
            docs.sort(key=_sort_key(field), reverse=direction < 0)
        docs = docs[skip:]
        if limit:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    async def count(self, collection, query=None):
        return sum(1 for doc in self._docs(collection) if _matches(doc, query))

    async def insert_one(self, collection, doc):
        self._check_unique(collection, doc)
        self._docs(collection).append(copy.deepcopy(doc))
        return doc

    async def update_one(self, collection, query, values):
        for doc in self._docs(collection):
            if _matches(doc, query):
                self._check_unique(collection, {**doc, **values}, ignore=doc)
                doc.update(copy.deepcopy(values))
                return copy.deepcopy(doc)
        return None

    async def update_many(self, collection, query, values):
        modified = 0
        for doc in self._docs(collection):
            if _matches(doc, query):
                doc.update(copy.deepcopy(values))
                modified += 1
        return modified

    async def delete_one(self, collection, query):
        docs = self._docs(collection)
        for index, doc in enumerate(docs):
            if _matches(doc, query):
                del docs[index]
                return True
        return False

    async def delete_many(self, collection, query):
        docs = self._docs(collection)
        keep = [doc for doc in docs if not _matches(doc, query)]
        removed = len(docs) - len(keep)
        self.collections[collection] = keep
        return removed

    async def next_sequence(self, key):
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]


async def init_store() -> Store:
    """Build the store for this process: Mongo when configured, memory otherwise."""
    if not MONGO_URL:
        logger.warning("MONGO_URL not set. Running in demo mode with an in-memory store.")
        return MemoryStore()
    store = MongoStore(MONGO_URL, DB_NAME)
    await store.connect()
    return store
