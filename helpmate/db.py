# helpmate/db.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from helpmate import config

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None


def get_database() -> AsyncIOMotorDatabase:
    """Shared handle to the configured database. The client connects lazily."""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(config.MONGODB_URI)
    return _client[config.MONGODB_DB]


def close_client():
    global _client
    if _client is not None:
        _client.close()
        _client = None


async def ensure_indexes(db: AsyncIOMotorDatabase):
    await db["users"].create_index("email", unique=True)
    await db["tickets"].create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])
    await db["tickets"].create_index("status")
    await db["comments"].create_index([("ticket_id", ASCENDING), ("created_at", ASCENDING)])
    logger.info("Database indexes ensured on %s", db.name)
