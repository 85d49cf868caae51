"""Chat session and messaging routes."""

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from eduassist.api.deps import CurrentUser, DbSession, verify_ownership_or_404
from eduassist.config import get_settings
from eduassist.db import repository
from eduassist.db.models import ChatRole
from eduassist.errors import AIGatewayError
from eduassist.messages import t
from eduassist.schemas.chat import (
    ChatExchangeResponse,
    ChatMessageCreate,
    ChatMessageRead,
    ChatSessionCreate,
    ChatSessionRead,
    ChatSessionUpdate,
    ChatSessionWithMessages,
)
from eduassist.services import ai_gateway

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/chat", tags=["chat"])
settings = get_settings()

# Columns that may be cleared with an explicit null
_NULLABLE_SESSION_FIELDS = {"subject"}


# =============================================================================
# SESSIONS
# =============================================================================


@router.post("/sessions", response_model=ChatSessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    data: ChatSessionCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> ChatSessionRead:
    """
    Start a chat session, spending one session credit.

    The credit is taken and the session inserted in one transaction, so a
    failed insert never costs a credit. 403 when no credit is available or
    the subscription has expired.
    """
    remaining = await repository.consume_session_credit(db, current_user.id)
    if remaining is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=t("no_sessions_remaining"))

    session = await repository.create_chat_session(
        db, user_id=current_user.id, title=data.title, subject=data.subject
    )
    await db.commit()
    logger.info("User %s opened chat session %s (%d credits left)", current_user.id, session.id, remaining)
    return ChatSessionRead.model_validate(session)


@router.get("/sessions", response_model=list[ChatSessionRead])
async def list_sessions(current_user: CurrentUser, db: DbSession) -> list[ChatSessionRead]:
    """List the caller's sessions, most recently active first."""
    sessions = await repository.list_user_chat_sessions(db, current_user.id)
    return [ChatSessionRead.model_validate(s) for s in sessions]


@router.get("/sessions/{session_id}", response_model=ChatSessionWithMessages)
async def get_session(
    session_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> ChatSessionWithMessages:
    """Get a session with its full history, oldest message first."""
    session = await repository.get_chat_session(db, session_id)
    verify_ownership_or_404(session, current_user, "session_not_found")

    messages = await repository.list_session_messages(db, session.id)
    return ChatSessionWithMessages(
        session=ChatSessionRead.model_validate(session),
        messages=[ChatMessageRead.model_validate(m) for m in messages],
    )


@router.patch("/sessions/{session_id}", response_model=ChatSessionRead)
async def update_session(
    session_id: UUID,
    data: ChatSessionUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ChatSessionRead:
    """Rename, re-tag or archive a session."""
    session = await repository.get_chat_session(db, session_id)
    verify_ownership_or_404(session, current_user, "session_not_found")

    changes = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None or key in _NULLABLE_SESSION_FIELDS
    }
    updated = await repository.update_chat_session(db, session.id, **changes)
    await db.commit()
    return ChatSessionRead.model_validate(updated)


# =============================================================================
# MESSAGES
# =============================================================================


@router.post(
    "/sessions/{session_id}/messages",
    response_model=ChatExchangeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_message(
    session_id: UUID,
    data: ChatMessageCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> ChatExchangeResponse:
    """
    Send a message and get the assistant's reply.

    The user message is committed before the LLM is called. If the call
    fails, the response is a 500 whose ``details.user_message`` holds the
    stored user message.
    """
    session = await repository.get_chat_session(db, session_id)
    verify_ownership_or_404(session, current_user, "session_not_found")

    history = await repository.list_session_messages(db, session.id, last=settings.chat_history_window)

    user_message = await repository.create_chat_message(
        db, session_id=session.id, role=ChatRole.USER.value, content=data.content
    )
    await repository.update_chat_session(db, session.id)
    await db.commit()
    user_message_read = ChatMessageRead.model_validate(user_message)

    try:
        reply = await ai_gateway.chat_reply(
            data.content,
            subject=session.subject,
            history=[{"role": m.role, "content": m.content} for m in history],
        )
    except AIGatewayError as e:
        raise AIGatewayError(
            e.message,
            details={"user_message": user_message_read.model_dump(mode="json", by_alias=True)},
        ) from e

    ai_message = await repository.create_chat_message(
        db,
        session_id=session.id,
        role=ChatRole.ASSISTANT.value,
        content=reply.content,
        metadata=reply.metadata.model_dump(),
    )
    await repository.update_chat_session(db, session.id)
    await db.commit()

    return ChatExchangeResponse(
        user_message=user_message_read,
        ai_message=ChatMessageRead.model_validate(ai_message),
    )
