# helpmate/services/tickets.py
import logging
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from helpmate import policy
from helpmate.errors import Forbidden, NotFound
from helpmate.models import (
    Actor,
    Attachment,
    Comment,
    Role,
    Stats,
    Ticket,
    TicketDetail,
    TicketFilters,
    TicketStatus,
)
from helpmate.schemas.ticket import CommentCreate, TicketCreate
from helpmate.stores.comments import CommentStore
from helpmate.stores.tickets import TicketStore, filter_tickets
from helpmate.stores.users import UserStore

logger = logging.getLogger(__name__)

PURGE_BATCH_SIZE = 500


class InvalidOwner(NotFound):
    default_message = "Ticket owner does not exist"


class TicketService:
    """
    Entry point for every ticket operation.

    Each call loads what the access policy needs, asks the policy, and only
    then touches the stores. A denied call never reaches a store write.
    """

    def __init__(self, users: UserStore, tickets: TicketStore, comments: CommentStore):
        self.users = users
        self.tickets = tickets
        self.comments = comments

    @classmethod
    def from_database(cls, db: AsyncIOMotorDatabase) -> "TicketService":
        users = UserStore(db)
        return cls(users, TicketStore(db, users), CommentStore(db, users))

    async def _get_ticket_or_404(self, ticket_id: str) -> Ticket:
        ticket = await self.tickets.get_by_id(ticket_id)
        if ticket is None:
            raise NotFound("Ticket not found")
        return ticket

    def _deny(self, actor: Actor, action: str, ticket_id: Optional[str] = None):
        logger.warning("Denied %s for user %s on ticket %s", action, actor.id, ticket_id)
        raise Forbidden("Access denied")

    # -----------------------------
    # Tickets
    # -----------------------------
    async def create_ticket(self, actor: Actor, data: TicketCreate, attachment: Optional[Attachment] = None) -> Ticket:
        owner = await self.users.find_by_id(actor.id)
        if owner is None:
            raise InvalidOwner()

        # the owner is always the caller, status always starts open
        ticket = await self.tickets.create(
            title=data.title,
            description=data.description,
            category=data.category,
            priority=data.priority,
            owner_id=owner.id,
            attachment=attachment,
        )
        logger.info("User %s created ticket %s", actor.id, ticket.id)
        return ticket

    async def list_tickets(self, actor: Actor, filters: Optional[TicketFilters] = None) -> List[Ticket]:
        if actor.role == Role.ADMIN:
            tickets = await self.tickets.list_all()
        else:
            tickets = await self.tickets.list_by_owner(actor.id)
        return filter_tickets(tickets, filters)

    async def get_ticket(self, actor: Actor, ticket_id: str) -> TicketDetail:
        ticket = await self._get_ticket_or_404(ticket_id)
        if not policy.can_read_ticket(actor, ticket):
            self._deny(actor, "read", ticket_id)

        comments = await self.comments.list_by_ticket(ticket.id)
        return TicketDetail(**ticket.model_dump(), comments=comments)

    async def set_ticket_status(self, actor: Actor, ticket_id: str, status: TicketStatus) -> Ticket:
        ticket = await self._get_ticket_or_404(ticket_id)
        if not policy.can_write_ticket_status(actor, ticket):
            self._deny(actor, "status update", ticket_id)

        updated = await self.tickets.update_status(ticket.id, status)
        if updated is None:
            # deleted between the lookup and the update
            raise NotFound("Ticket not found")
        logger.info("User %s moved ticket %s from %s to %s", actor.id, ticket.id, ticket.status.value, updated.status.value)
        return updated

    async def delete_ticket(self, actor: Actor, ticket_id: str) -> None:
        """
        Delete a ticket and its comments.

        Comments go first: if the ticket delete then fails, the ticket is still
        there and a retried delete finishes the job without leaving orphans.
        A second sweep after the ticket is gone catches replies that landed
        between the two steps.
        """
        if not policy.can_delete_ticket(actor):
            self._deny(actor, "delete", ticket_id)

        ticket = await self._get_ticket_or_404(ticket_id)
        removed = await self.comments.delete_all_for_ticket(ticket.id)
        await self.tickets.delete(ticket.id)
        removed += await self.comments.delete_all_for_ticket(ticket.id)
        logger.info("User %s deleted ticket %s and %d comments", actor.id, ticket.id, removed)

    # -----------------------------
    # Comments
    # -----------------------------
    async def add_comment(self, actor: Actor, ticket_id: str, data: CommentCreate) -> Comment:
        ticket = await self._get_ticket_or_404(ticket_id)
        if not policy.can_comment(actor, ticket):
            self._deny(actor, "comment", ticket_id)

        comment = await self.comments.create(ticket.id, actor.id, data.content)
        if not await self.tickets.existing_ids([ticket.id]):
            # the ticket was deleted while the comment was being written
            await self.comments.delete(comment.id)
            raise NotFound("Ticket not found")
        logger.info("User %s commented on ticket %s", actor.id, ticket.id)
        return comment

    async def purge_orphan_comments(self) -> int:
        """
        Delete comments whose parent ticket no longer exists.

        Only ticket ids confirmed missing are purged, so tickets created while
        the pass runs keep their comments. Safe to run any number of times.
        """
        referenced = await self.comments.ticket_ids()
        missing = []
        for start in range(0, len(referenced), PURGE_BATCH_SIZE):
            batch = referenced[start:start + PURGE_BATCH_SIZE]
            live = await self.tickets.existing_ids(batch)
            missing.extend(i for i in batch if i not in live)

        if not missing:
            return 0
        purged = await self.comments.delete_for_tickets(missing)
        logger.info("Purged %d orphaned comments from %d deleted tickets", purged, len(missing))
        return purged

    # -----------------------------
    # Stats
    # -----------------------------
    async def get_stats(self, actor: Actor) -> Stats:
        if not policy.can_view_stats(actor):
            self._deny(actor, "stats")

        counts = await self.tickets.count_by_status()
        return Stats(
            total_tickets=counts["total"],
            open_tickets=counts[TicketStatus.OPEN.value],
            in_progress_tickets=counts[TicketStatus.IN_PROGRESS.value],
            resolved_tickets=counts[TicketStatus.RESOLVED.value],
            total_users=await self.users.count_by_role(Role.USER),
        )
