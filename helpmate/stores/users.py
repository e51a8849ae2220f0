# helpmate/stores/users.py
import logging
from typing import Dict, Iterable, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from helpmate.errors import DuplicateEmail
from helpmate.models import Role, User, utcnow
from helpmate.stores.base import storage_errors, to_object_id

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def user_from_doc(doc: dict) -> User:
    return User(
        id=str(doc["_id"]),
        name=doc["name"],
        email=doc["email"],
        password_hash=doc["password"],
        role=doc.get("role", Role.USER),
        created_at=doc["created_at"],
    )


class UserStore:
    """Credential store. Owns the ``users`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["users"]

    async def create(self, name: str, email: str, password_hash: str, role: Role = Role.USER) -> User:
        email = normalize_email(email)
        with storage_errors("user create"):
            if await self.collection.find_one({"email": email}):
                raise DuplicateEmail()

            doc = {
                "name": name,
                "email": email,
                "password": password_hash,
                "role": Role(role).value,
                "created_at": utcnow(),
            }
            try:
                result = await self.collection.insert_one(doc)
            except DuplicateKeyError:
                # lost a race against a concurrent registration
                raise DuplicateEmail()

        doc["_id"] = result.inserted_id
        logger.debug("Inserted user %s", doc["_id"])
        return user_from_doc(doc)

    async def find_by_email(self, email: str) -> Optional[User]:
        with storage_errors("user lookup"):
            doc = await self.collection.find_one({"email": normalize_email(email)})
        return user_from_doc(doc) if doc else None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        with storage_errors("user lookup"):
            doc = await self.collection.find_one({"_id": oid})
        return user_from_doc(doc) if doc else None

    async def find_many(self, user_ids: Iterable[str]) -> Dict[str, User]:
        oids = [oid for oid in (to_object_id(i) for i in set(user_ids)) if oid is not None]
        if not oids:
            return {}
        with storage_errors("user lookup"):
            docs = await self.collection.find({"_id": {"$in": oids}}).to_list(length=None)
        return {str(doc["_id"]): user_from_doc(doc) for doc in docs}

    async def count_by_role(self, role: Role) -> int:
        with storage_errors("user count"):
            return await self.collection.count_documents({"role": Role(role).value})
