from datetime import datetime, timezone
from itertools import product

from helpmate.models import Category, Priority, Ticket, TicketFilters, TicketStatus
from helpmate.stores.tickets import filter_tickets


def build_tickets():
    now = datetime.now(timezone.utc)
    tickets = []
    for i, (status, category, priority) in enumerate(product(TicketStatus, Category, Priority)):
        tickets.append(
            Ticket(
                id=f"{i:024x}",
                title=f"Ticket {i}",
                description="...",
                category=category,
                priority=priority,
                status=status,
                owner_id="65f000000000000000000001",
                created_at=now,
                updated_at=now,
            )
        )
    return tickets


def ids(tickets):
    return [t.id for t in tickets]


def test_no_filters_passes_everything_through():
    tickets = build_tickets()
    assert ids(filter_tickets(tickets)) == ids(tickets)
    assert ids(filter_tickets(tickets, TicketFilters())) == ids(tickets)


def test_each_field_is_an_equality_match():
    tickets = build_tickets()
    result = filter_tickets(tickets, TicketFilters(status=TicketStatus.RESOLVED, priority=Priority.LOW))
    assert len(result) == len(Category)
    assert all(t.status == TicketStatus.RESOLVED and t.priority == Priority.LOW for t in result)


def test_filtering_is_idempotent():
    tickets = build_tickets()
    filters = TicketFilters(status=TicketStatus.OPEN, category=Category.TECHNICAL)
    once = filter_tickets(tickets, filters)
    assert ids(filter_tickets(once, filters)) == ids(once)


def test_filtering_is_commutative():
    tickets = build_tickets()
    combined = filter_tickets(tickets, TicketFilters(status=TicketStatus.OPEN, category=Category.TECHNICAL))
    category_then_status = filter_tickets(
        filter_tickets(tickets, TicketFilters(category=Category.TECHNICAL)),
        TicketFilters(status=TicketStatus.OPEN),
    )
    status_then_category = filter_tickets(
        filter_tickets(tickets, TicketFilters(status=TicketStatus.OPEN)),
        TicketFilters(category=Category.TECHNICAL),
    )
    assert set(ids(combined)) == set(ids(category_then_status)) == set(ids(status_then_category))
    assert len(combined) == len(Priority)


def test_no_match_returns_empty_list():
    tickets = [t for t in build_tickets() if t.category != Category.BILLING]
    assert filter_tickets(tickets, TicketFilters(category=Category.BILLING)) == []
