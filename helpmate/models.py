# helpmate/models.py
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -------------------------
# Enumerations
# -------------------------
class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Category(str, Enum):
    TECHNICAL = "technical"
    ACCOUNT = "account"
    BILLING = "billing"
    FEATURE = "feature"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TicketStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


# -------------------------
# Users
# -------------------------
class User(BaseModel):
    id: str
    name: str
    email: str
    password_hash: str = Field(exclude=True, repr=False)
    role: Role = Role.USER
    created_at: datetime


class Actor(BaseModel):
    """The authenticated identity performing an operation."""

    id: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


# -------------------------
# Tickets & comments
# -------------------------
class Attachment(BaseModel):
    filename: str
    original_name: str
    media_type: str
    size: int
    path: str


class Ticket(BaseModel):
    id: str
    title: str
    description: str
    category: Category
    priority: Priority
    status: TicketStatus
    owner_id: str
    attachment: Optional[Attachment] = None
    created_at: datetime
    updated_at: datetime
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None


class Comment(BaseModel):
    id: str
    ticket_id: str
    author_id: str
    content: str
    created_at: datetime
    author_name: Optional[str] = None
    author_role: Optional[Role] = None


class TicketDetail(Ticket):
    comments: List[Comment] = []


class TicketFilters(BaseModel):
    status: Optional[TicketStatus] = None
    category: Optional[Category] = None
    priority: Optional[Priority] = None


class Stats(BaseModel):
    total_tickets: int
    open_tickets: int
    in_progress_tickets: int
    resolved_tickets: int
    total_users: int
