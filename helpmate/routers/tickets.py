# helpmate/routers/tickets.py
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import ValidationError
from helpmate.dependencies import get_attachment_store, get_current_actor, get_ticket_service
from helpmate.errors import InvalidInput
from helpmate.models import (
    Actor,
    Category,
    Priority,
    Ticket,
    TicketDetail,
    TicketFilters,
    TicketStatus,
)
from helpmate.schemas.ticket import CommentCreate, StatusUpdate, TicketCreate
from helpmate.services.attachments import AttachmentStore
from helpmate.services.tickets import TicketService

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


def _validation_message(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"])
    return f"{field}: {error['msg']}"


# -----------------------------
# CREATE Ticket
# -----------------------------
@router.post("", status_code=201)
async def create_ticket(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    priority: Optional[str] = Form(None),
    attachment: Optional[UploadFile] = File(None),
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service),
    attachments: AttachmentStore = Depends(get_attachment_store),
):
    fields = {"title": title, "description": description, "category": category}
    if priority:
        fields["priority"] = priority
    try:
        data = TicketCreate(**fields)
    except ValidationError as exc:
        raise InvalidInput(_validation_message(exc))

    stored = None
    if attachment is not None and attachment.filename:
        stored = await attachments.save(attachment)

    try:
        ticket = await service.create_ticket(actor, data, stored)
    except Exception:
        if stored is not None:
            attachments.discard(stored)
        raise

    return {"message": "Ticket created successfully", "ticket": ticket}


# -----------------------------
# LIST Tickets
# -----------------------------
@router.get("", response_model=List[Ticket])
async def list_tickets(
    status: Optional[TicketStatus] = Query(None),
    category: Optional[Category] = Query(None),
    priority: Optional[Priority] = Query(None),
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service),
):
    filters = TicketFilters(status=status, category=category, priority=priority)
    return await service.list_tickets(actor, filters)


# -----------------------------
# GET Ticket Detail
# -----------------------------
@router.get("/{ticket_id}", response_model=TicketDetail)
async def get_ticket_detail(
    ticket_id: str,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service),
):
    return await service.get_ticket(actor, ticket_id)


# -----------------------------
# UPDATE Ticket Status
# -----------------------------
@router.put("/{ticket_id}")
async def update_ticket(
    ticket_id: str,
    data: StatusUpdate,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service),
):
    ticket = await service.set_ticket_status(actor, ticket_id, data.status)
    return {"message": "Ticket updated successfully", "ticket": ticket}


# -----------------------------
# DELETE Ticket
# -----------------------------
@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: str,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service),
):
    await service.delete_ticket(actor, ticket_id)
    return {"message": "Ticket deleted"}


# -----------------------------
# ADD Comment
# -----------------------------
@router.post("/{ticket_id}/comments", status_code=201)
async def add_comment(
    ticket_id: str,
    data: CommentCreate,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service),
):
    comment = await service.add_comment(actor, ticket_id, data)
    return {"message": "Comment added successfully", "comment": comment}
