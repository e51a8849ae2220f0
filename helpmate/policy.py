# helpmate/policy.py
"""
Access policy: who may do what to which ticket.

Every check is a pure function of attributes already loaded by the caller.
Anything not explicitly allowed, including a missing actor or ticket, is denied.
"""
from typing import Optional
from helpmate.models import Actor, Role, Ticket


def _is_admin(actor: Optional[Actor]) -> bool:
    return actor is not None and actor.role == Role.ADMIN


def _is_owner(actor: Optional[Actor], ticket: Optional[Ticket]) -> bool:
    if actor is None or ticket is None:
        return False
    return actor.role == Role.USER and actor.id == ticket.owner_id


def can_read_ticket(actor: Optional[Actor], ticket: Optional[Ticket]) -> bool:
    if ticket is None:
        return False
    return _is_admin(actor) or _is_owner(actor, ticket)


def can_write_ticket_status(actor: Optional[Actor], ticket: Optional[Ticket]) -> bool:
    return ticket is not None and _is_admin(actor)


def can_delete_ticket(actor: Optional[Actor]) -> bool:
    return _is_admin(actor)


def can_comment(actor: Optional[Actor], ticket: Optional[Ticket]) -> bool:
    # same rule as reading: a non-owner non-admin may do neither
    return can_read_ticket(actor, ticket)


def can_view_stats(actor: Optional[Actor]) -> bool:
    return _is_admin(actor)
