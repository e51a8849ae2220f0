# helpmate/routers/stats.py
from fastapi import APIRouter, Depends
from helpmate.dependencies import get_current_actor, get_ticket_service
from helpmate.models import Actor, Stats
from helpmate.services.tickets import TicketService

router = APIRouter(prefix="/api/stats", tags=["Stats"])


@router.get("", response_model=Stats)
async def get_stats(
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service),
):
    return await service.get_stats(actor)
