# helpmate/stores/comments.py
import logging
from typing import Iterable, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from helpmate.models import Comment, User, utcnow
from helpmate.stores.base import storage_errors, to_object_id
from helpmate.stores.users import UserStore

logger = logging.getLogger(__name__)

OLDEST_FIRST = [("created_at", 1), ("_id", 1)]


def comment_from_doc(doc: dict, author: Optional[User] = None) -> Comment:
    return Comment(
        id=str(doc["_id"]),
        ticket_id=doc["ticket_id"],
        author_id=doc["author_id"],
        content=doc["content"],
        created_at=doc["created_at"],
        author_name=author.name if author else None,
        author_role=author.role if author else None,
    )


class CommentStore:
    """
    Owns the ``comments`` collection.

    Nothing here checks who may write; the caller has already authorized the
    operation. Deleting a ticket does not remove its comments on its own,
    ``delete_all_for_ticket`` has to be called explicitly.
    """

    def __init__(self, db: AsyncIOMotorDatabase, users: UserStore):
        self.collection = db["comments"]
        self.users = users

    async def create(self, ticket_id: str, author_id: str, content: str) -> Comment:
        doc = {
            "ticket_id": ticket_id,
            "author_id": author_id,
            "content": content,
            "created_at": utcnow(),
        }
        with storage_errors("comment create"):
            result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.debug("Inserted comment %s on ticket %s", result.inserted_id, ticket_id)
        author = await self.users.find_by_id(author_id)
        return comment_from_doc(doc, author)

    async def list_by_ticket(self, ticket_id: str) -> List[Comment]:
        with storage_errors("comment list"):
            docs = await self.collection.find({"ticket_id": ticket_id}).sort(OLDEST_FIRST).to_list(length=None)
        authors = await self.users.find_many(doc["author_id"] for doc in docs)
        return [comment_from_doc(doc, authors.get(doc["author_id"])) for doc in docs]

    async def delete_all_for_ticket(self, ticket_id: str) -> int:
        with storage_errors("comment delete"):
            result = await self.collection.delete_many({"ticket_id": ticket_id})
        return result.deleted_count

    async def delete(self, comment_id: str) -> bool:
        oid = to_object_id(comment_id)
        if oid is None:
            return False
        with storage_errors("comment delete"):
            result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def ticket_ids(self) -> List[str]:
        """Distinct parent ticket ids referenced by any comment."""
        with storage_errors("comment ticket ids"):
            return await self.collection.distinct("ticket_id")

    async def delete_for_tickets(self, ticket_ids: Iterable[str]) -> int:
        with storage_errors("comment delete"):
            result = await self.collection.delete_many({"ticket_id": {"$in": list(ticket_ids)}})
        return result.deleted_count
