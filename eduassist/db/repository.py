"""
Persistence service: one async function per entity operation.

Conventions:
- Functions flush but never commit; the request handler owns the transaction.
- ``get_*`` returns None for a missing row instead of raising.
- Nothing here checks cross-user ownership. Callers must compare
  ``resource.user_id`` with the caller before exposing a row.
- List functions return newest first, except ``list_session_messages``
  which is chronological.
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from eduassist.db.models import (
    TICKET_TRANSITIONS,
    ChatMessage,
    ChatSession,
    PerformanceAnalytics,
    SupportTicket,
    UploadedFile,
    User,
)
from eduassist.errors import InvalidTicketTransition


# =============================================================================
# USERS
# =============================================================================


async def get_user(db: AsyncSession, user_id: UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_external_id(db: AsyncSession, external_id: str) -> User | None:
    result = await db.execute(select(User).where(User.external_id == external_id))
    return result.scalar_one_or_none()


async def upsert_user(
    db: AsyncSession,
    *,
    external_id: str,
    email: str | None,
    first_name: str | None,
    last_name: str | None,
    profile_image_url: str | None,
    auth_provider: str = "google",
) -> User:
    """
    Insert a user on first login or refresh their profile on later logins.

    Keyed by the identity provider's subject. Billing and credit columns are
    never touched here.
    """
    profile = {
        "email": email,
        "first_name": first_name,
        "last_name": last_name,
        "profile_image_url": profile_image_url,
    }
    stmt = (
        insert(User)
        .values(external_id=external_id, auth_provider=auth_provider, **profile)
        .on_conflict_do_update(
            index_elements=[User.external_id],
            set_={**profile, "updated_at": func.now()},
        )
        .returning(User)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one()


async def update_user_stripe_info(
    db: AsyncSession,
    user_id: UUID,
    *,
    customer_id: str,
    subscription_id: str | None = None,
) -> User | None:
    values: dict = {"stripe_customer_id": customer_id, "updated_at": func.now()}
    if subscription_id is not None:
        values["stripe_subscription_id"] = subscription_id
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(**values)
        .returning(User)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def update_user_subscription(
    db: AsyncSession,
    user_id: UUID,
    *,
    plan: str,
    expires_at: datetime,
    sessions: int,
) -> User | None:
    """Mirror a confirmed provider subscription onto the user record."""
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            current_plan=plan,
            subscription_expires_at=expires_at,
            sessions_remaining=sessions,
            updated_at=func.now(),
        )
        .returning(User)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def consume_session_credit(db: AsyncSession, user_id: UUID) -> int | None:
    """
    Take one session credit if the user has any and the plan hasn't expired.

    Single conditional UPDATE, so concurrent callers can never drive the
    balance below zero. Returns the new balance, or None if nothing was taken.
    """
    result = await db.execute(
        update(User)
        .where(
            User.id == user_id,
            User.sessions_remaining > 0,
            User.subscription_expires_at > func.now(),
        )
        .values(
            sessions_remaining=User.sessions_remaining - 1,
            updated_at=func.now(),
        )
        .returning(User.sessions_remaining)
    )
    return result.scalar_one_or_none()


# =============================================================================
# CHAT SESSIONS
# =============================================================================


async def create_chat_session(
    db: AsyncSession,
    *,
    user_id: UUID,
    title: str,
    subject: str | None = None,
) -> ChatSession:
    session = ChatSession(user_id=user_id, title=title, subject=subject, is_active=True)
    db.add(session)
    await db.flush()
    await db.refresh(session)
    return session


async def get_chat_session(db: AsyncSession, session_id: UUID) -> ChatSession | None:
    result = await db.execute(select(ChatSession).where(ChatSession.id == session_id))
    return result.scalar_one_or_none()


async def list_user_chat_sessions(db: AsyncSession, user_id: UUID) -> Sequence[ChatSession]:
    result = await db.execute(
        select(ChatSession)
        .where(ChatSession.user_id == user_id)
        .order_by(ChatSession.updated_at.desc())
    )
    return result.scalars().all()


async def update_chat_session(db: AsyncSession, session_id: UUID, **changes) -> ChatSession | None:
    """Apply ``changes`` and refresh ``updated_at``. With no changes it only touches the row."""
    result = await db.execute(
        update(ChatSession)
        .where(ChatSession.id == session_id)
        .values(**changes, updated_at=func.now())
        .returning(ChatSession)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


# =============================================================================
# CHAT MESSAGES
# =============================================================================


async def create_chat_message(
    db: AsyncSession,
    *,
    session_id: UUID,
    role: str,
    content: str,
    metadata: dict | None = None,
) -> ChatMessage:
    message = ChatMessage(
        session_id=session_id,
        role=role,
        content=content,
        message_metadata=metadata,
    )
    db.add(message)
    await db.flush()
    await db.refresh(message)
    return message


async def list_session_messages(
    db: AsyncSession,
    session_id: UUID,
    *,
    last: int | None = None,
) -> Sequence[ChatMessage]:
    """Messages oldest first. ``last`` keeps only the most recent N, still oldest first."""
    if last is None:
        result = await db.execute(
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.created_at.asc())
        )
        return result.scalars().all()

    result = await db.execute(
        select(ChatMessage)
        .where(ChatMessage.session_id == session_id)
        .order_by(ChatMessage.created_at.desc())
        .limit(last)
    )
    return list(reversed(result.scalars().all()))


# =============================================================================
# UPLOADED FILES
# =============================================================================


async def create_uploaded_file(
    db: AsyncSession,
    *,
    user_id: UUID,
    session_id: UUID | None,
    file_name: str,
    file_path: str,
    file_size: int,
    mime_type: str,
) -> UploadedFile:
    uploaded = UploadedFile(
        user_id=user_id,
        session_id=session_id,
        file_name=file_name,
        file_path=file_path,
        file_size=file_size,
        mime_type=mime_type,
        is_processed=False,
    )
    db.add(uploaded)
    await db.flush()
    await db.refresh(uploaded)
    return uploaded


async def get_uploaded_file(db: AsyncSession, file_id: UUID) -> UploadedFile | None:
    result = await db.execute(select(UploadedFile).where(UploadedFile.id == file_id))
    return result.scalar_one_or_none()


async def list_user_files(db: AsyncSession, user_id: UUID) -> Sequence[UploadedFile]:
    result = await db.execute(
        select(UploadedFile)
        .where(UploadedFile.user_id == user_id)
        .order_by(UploadedFile.created_at.desc())
    )
    return result.scalars().all()


async def update_file_process_status(
    db: AsyncSession, file_id: UUID, is_processed: bool
) -> UploadedFile | None:
    result = await db.execute(
        update(UploadedFile)
        .where(UploadedFile.id == file_id)
        .values(is_processed=is_processed)
        .returning(UploadedFile)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


# =============================================================================
# PERFORMANCE ANALYTICS
# =============================================================================


async def create_performance_analytics(
    db: AsyncSession,
    *,
    user_id: UUID,
    session_id: UUID | None,
    subject: str,
    chapter: str | None,
    score: Decimal,
    total_questions: int,
    correct_answers: int,
    weak_areas: list[str],
    recommendations: list[str],
) -> PerformanceAnalytics:
    row = PerformanceAnalytics(
        user_id=user_id,
        session_id=session_id,
        subject=subject,
        chapter=chapter,
        score=score,
        total_questions=total_questions,
        correct_answers=correct_answers,
        weak_areas=weak_areas,
        recommendations=recommendations,
    )
    db.add(row)
    await db.flush()
    await db.refresh(row)
    return row


async def list_user_performance_analytics(
    db: AsyncSession,
    user_id: UUID,
    subject: str | None = None,
) -> Sequence[PerformanceAnalytics]:
    query = select(PerformanceAnalytics).where(PerformanceAnalytics.user_id == user_id)
    if subject:
        query = query.where(PerformanceAnalytics.subject == subject)
    result = await db.execute(query.order_by(PerformanceAnalytics.created_at.desc()))
    return result.scalars().all()


# =============================================================================
# SUPPORT TICKETS
# =============================================================================


async def create_support_ticket(
    db: AsyncSession,
    *,
    user_id: UUID | None,
    first_name: str,
    last_name: str,
    email: str,
    category: str,
    subject: str,
    message: str,
) -> SupportTicket:
    ticket = SupportTicket(
        user_id=user_id,
        first_name=first_name,
        last_name=last_name,
        email=email,
        category=category,
        subject=subject,
        message=message,
        status="open",
    )
    db.add(ticket)
    await db.flush()
    await db.refresh(ticket)
    return ticket


async def get_support_ticket(db: AsyncSession, ticket_id: UUID) -> SupportTicket | None:
    result = await db.execute(select(SupportTicket).where(SupportTicket.id == ticket_id))
    return result.scalar_one_or_none()


async def list_user_support_tickets(db: AsyncSession, user_id: UUID) -> Sequence[SupportTicket]:
    result = await db.execute(
        select(SupportTicket)
        .where(SupportTicket.user_id == user_id)
        .order_by(SupportTicket.created_at.desc())
    )
    return result.scalars().all()


async def update_support_ticket_status(
    db: AsyncSession, ticket: SupportTicket, status: str
) -> SupportTicket:
    """
    Move a ticket to ``status``.

    Raises InvalidTicketTransition if the ticket's state machine forbids it.
    The update is conditional on the current status, so a concurrent change
    surfaces as an invalid transition instead of being overwritten.
    """
    current = ticket.status
    if status not in TICKET_TRANSITIONS.get(current, frozenset()):
        raise InvalidTicketTransition(current, status)

    result = await db.execute(
        update(SupportTicket)
        .where(SupportTicket.id == ticket.id, SupportTicket.status == current)
        .values(status=status, updated_at=func.now())
        .returning(SupportTicket)
        .execution_options(populate_existing=True)
    )
    updated = result.scalar_one_or_none()
    if updated is None:
        raise InvalidTicketTransition(current, status)
    return updated
