# helpmate/seed.py
import asyncio
import logging
from motor.motor_asyncio import AsyncIOMotorDatabase
from helpmate import config
from helpmate.auth import get_password_hash
from helpmate.db import close_client, ensure_indexes, get_database
from helpmate.logging_config import configure_logging
from helpmate.models import Role
from helpmate.stores.users import UserStore

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"
DEMO_USERS = [
    {"name": "Admin User", "email": "admin@example.com", "role": Role.ADMIN},
    {"name": "John Doe", "email": "john@example.com", "role": Role.USER},
]


async def seed_demo_users(db: AsyncIOMotorDatabase) -> int:
    """Create the demo accounts, only when no user exists yet."""
    if await db["users"].count_documents({}) > 0:
        return 0

    users = UserStore(db)
    for demo in DEMO_USERS:
        await users.create(
            name=demo["name"],
            email=demo["email"],
            password_hash=get_password_hash(DEMO_PASSWORD),
            role=demo["role"],
        )
    logger.info("Seeded %d demo users", len(DEMO_USERS))
    return len(DEMO_USERS)


async def main():
    configure_logging(config.LOG_LEVEL)
    db = get_database()
    await ensure_indexes(db)
    created = await seed_demo_users(db)
    print(f"✅ Seeded {created} demo users")
    close_client()


if __name__ == "__main__":
    asyncio.run(main())
