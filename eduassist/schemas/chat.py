"""Pydantic schemas for chat sessions and messages."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from eduassist.schemas.base import BaseSchema, CreatedAtMixin, IDMixin, TimestampMixin


# Request schemas
class ChatSessionCreate(BaseSchema):
    """Request to start a new chat session."""

    title: str = Field(..., min_length=1, max_length=255)
    subject: str | None = Field(None, max_length=255)


class ChatSessionUpdate(BaseSchema):
    """Request to rename, re-tag or archive a session."""

    title: str | None = Field(None, min_length=1, max_length=255)
    subject: str | None = Field(None, max_length=255)
    is_active: bool | None = None


class ChatMessageCreate(BaseSchema):
    """Request to send a chat message. Only students post messages."""

    content: str = Field(..., min_length=1, max_length=10000)
    role: Literal["user"] = "user"


# Response schemas
class ChatMessageRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Chat message response."""

    session_id: UUID
    role: str
    content: str
    message_metadata: dict | None = Field(None, serialization_alias="metadata")


class ChatSessionRead(BaseSchema, IDMixin, TimestampMixin):
    """Chat session response."""

    user_id: UUID
    title: str
    subject: str | None
    is_active: bool


class ChatSessionWithMessages(BaseModel):
    """Session with its full message history, oldest first."""

    session: ChatSessionRead
    messages: list[ChatMessageRead]


class ChatExchangeResponse(BaseModel):
    """The stored user message and the assistant's reply."""

    user_message: ChatMessageRead
    ai_message: ChatMessageRead
