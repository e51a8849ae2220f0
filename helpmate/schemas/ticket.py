from pydantic import BaseModel, ConfigDict, Field
from helpmate.models import Category, Priority, TicketStatus


class TicketCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: Category
    priority: Priority = Priority.MEDIUM


class StatusUpdate(BaseModel):
    status: TicketStatus


class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=5000)
