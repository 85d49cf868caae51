"""Support ticket schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from eduassist.db.models import TicketStatus
from eduassist.schemas.base import BaseSchema, IDMixin, TimestampMixin


class SupportTicketCreate(BaseSchema):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    category: str = Field(..., min_length=1, max_length=100)
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=10000)


class SupportTicketStatusUpdate(BaseSchema):
    status: TicketStatus


class SupportTicketRead(BaseSchema, IDMixin, TimestampMixin):
    user_id: UUID | None
    first_name: str
    last_name: str
    email: str
    category: str
    subject: str
    message: str
    status: TicketStatus
