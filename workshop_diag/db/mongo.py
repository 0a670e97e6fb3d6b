import os
from typing import AsyncGenerator, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

PROBLEMS_COLLECTION = "common_problems"

_client: Optional[AsyncIOMotorClient] = None


def _get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
        _client = AsyncIOMotorClient(uri)
    return _client


def _db_name() -> str:
    return os.getenv("MONGODB_DB", "workshop_diag")


async def get_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    client = _get_client()
    # client is shared across requests and never closed here
    yield client[_db_name()]


async def init_db() -> None:
    """Create indexes for collections used by the app."""
    db = _get_client()[_db_name()]
    # common_problems: unique name, catalog lookups by active flag + category
    await db[PROBLEMS_COLLECTION].create_index("name", unique=True)
    await db[PROBLEMS_COLLECTION].create_index([("is_active", 1), ("category", 1)])
