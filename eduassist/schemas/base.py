"""Shared pydantic configuration and field mixins for API schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Reads ORM rows directly and trims surrounding whitespace from strings."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class IDMixin(BaseModel):
    id: UUID


class CreatedAtMixin(BaseModel):
    """For append-only rows (messages, uploads, analytics)."""

    created_at: datetime


class TimestampMixin(CreatedAtMixin):
    """For rows that change after creation (sessions, tickets)."""

    updated_at: datetime
