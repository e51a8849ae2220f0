# helpmate/stores/tickets.py
import logging
from typing import Dict, Iterable, List, Optional, Set
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from helpmate.models import (
    Attachment,
    Category,
    Priority,
    Ticket,
    TicketFilters,
    TicketStatus,
    User,
    utcnow,
)
from helpmate.stores.base import storage_errors, to_object_id
from helpmate.stores.users import UserStore

logger = logging.getLogger(__name__)

# newest first; ObjectIds grow monotonically so they settle equal timestamps
NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


def ticket_from_doc(doc: dict, owner: Optional[User] = None) -> Ticket:
    attachment = doc.get("attachment")
    return Ticket(
        id=str(doc["_id"]),
        title=doc["title"],
        description=doc["description"],
        category=doc["category"],
        priority=doc["priority"],
        status=doc["status"],
        owner_id=doc["owner_id"],
        attachment=Attachment(**attachment) if attachment else None,
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
        owner_name=owner.name if owner else None,
        owner_email=owner.email if owner else None,
    )


def filter_tickets(tickets: Iterable[Ticket], filters: Optional[TicketFilters] = None) -> List[Ticket]:
    """
    Keep the tickets matching every filter field that is set.

    Unset fields pass everything through, so applying the same filters twice,
    or the fields one at a time in any order, gives the same result.
    """
    tickets = list(tickets)
    if filters is None:
        return tickets
    if filters.status is not None:
        tickets = [t for t in tickets if t.status == filters.status]
    if filters.category is not None:
        tickets = [t for t in tickets if t.category == filters.category]
    if filters.priority is not None:
        tickets = [t for t in tickets if t.priority == filters.priority]
    return tickets


class TicketStore:
    """Owns the ``tickets`` collection. Callers are trusted to pass a valid owner."""

    def __init__(self, db: AsyncIOMotorDatabase, users: UserStore):
        self.collection = db["tickets"]
        self.users = users

    async def _join_owners(self, docs: List[dict]) -> List[Ticket]:
        owners = await self.users.find_many(doc["owner_id"] for doc in docs)
        return [ticket_from_doc(doc, owners.get(doc["owner_id"])) for doc in docs]

    async def create(
        self,
        title: str,
        description: str,
        category: Category,
        priority: Priority,
        owner_id: str,
        attachment: Optional[Attachment] = None,
    ) -> Ticket:
        now = utcnow()
        doc = {
            "title": title,
            "description": description,
            "category": Category(category).value,
            "priority": Priority(priority).value,
            "status": TicketStatus.OPEN.value,
            "owner_id": owner_id,
            "attachment": attachment.model_dump() if attachment else None,
            "created_at": now,
            "updated_at": now,
        }
        with storage_errors("ticket create"):
            result = await self.collection.insert_one(doc)
        logger.debug("Inserted ticket %s", result.inserted_id)
        return await self.get_by_id(str(result.inserted_id))

    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        oid = to_object_id(ticket_id)
        if oid is None:
            return None
        with storage_errors("ticket lookup"):
            doc = await self.collection.find_one({"_id": oid})
        if not doc:
            return None
        owner = await self.users.find_by_id(doc["owner_id"])
        return ticket_from_doc(doc, owner)

    async def list_all(self) -> List[Ticket]:
        with storage_errors("ticket list"):
            docs = await self.collection.find({}).sort(NEWEST_FIRST).to_list(length=None)
        return await self._join_owners(docs)

    async def list_by_owner(self, owner_id: str) -> List[Ticket]:
        with storage_errors("ticket list"):
            docs = await self.collection.find({"owner_id": owner_id}).sort(NEWEST_FIRST).to_list(length=None)
        return await self._join_owners(docs)

    async def update_status(self, ticket_id: str, status: TicketStatus) -> Optional[Ticket]:
        oid = to_object_id(ticket_id)
        if oid is None:
            return None
        with storage_errors("ticket status update"):
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": {"status": TicketStatus(status).value, "updated_at": utcnow()}},
                return_document=ReturnDocument.AFTER,
            )
        if not doc:
            return None
        owner = await self.users.find_by_id(doc["owner_id"])
        return ticket_from_doc(doc, owner)

    async def delete(self, ticket_id: str) -> bool:
        """Remove a ticket. Missing ids are not an error; returns whether a row went away."""
        oid = to_object_id(ticket_id)
        if oid is None:
            return False
        with storage_errors("ticket delete"):
            result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def existing_ids(self, ticket_ids: Iterable[str]) -> Set[str]:
        """Return the subset of the given ids that still name a ticket."""
        oids = [oid for oid in (to_object_id(i) for i in ticket_ids) if oid is not None]
        if not oids:
            return set()
        with storage_errors("ticket lookup"):
            docs = await self.collection.find({"_id": {"$in": oids}}, {"_id": 1}).to_list(length=None)
        return {str(doc["_id"]) for doc in docs}

    async def count_by_status(self) -> Dict[str, int]:
        counts = {}
        with storage_errors("ticket count"):
            counts["total"] = await self.collection.count_documents({})
            for status in TicketStatus:
                counts[status.value] = await self.collection.count_documents({"status": status.value})
        return counts
