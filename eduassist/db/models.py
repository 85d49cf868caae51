"""
SQLAlchemy 2.0 Models for EduAssist.

Uses modern declarative syntax with Mapped[] type annotations.
All models use UUID primary keys and proper relationship definitions.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    ARRAY,
    CheckConstraint,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import CITEXT, ENUM as PGENUM, JSONB, TIMESTAMP, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eduassist.db.base import Base


# =============================================================================
# ENUMS
# =============================================================================


class SubscriptionPlan(str, PyEnum):
    """Purchasable subscription plans."""

    EMERGENCY = "emergency"
    BASIC = "basic"
    PREMIUM = "premium"


class SubscriptionStatus(str, PyEnum):
    """Derived subscription standing (never stored)."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    EXPIRED = "expired"


class ChatRole(str, PyEnum):
    """Role in chat conversation."""

    USER = "user"
    ASSISTANT = "assistant"


class TicketStatus(str, PyEnum):
    """Lifecycle of a support ticket."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


# Allowed support ticket status changes
TICKET_TRANSITIONS: dict[str, frozenset[str]] = {
    TicketStatus.OPEN.value: frozenset({"in_progress", "resolved", "closed"}),
    TicketStatus.IN_PROGRESS.value: frozenset({"resolved", "closed"}),
    TicketStatus.RESOLVED.value: frozenset({"closed", "open"}),
    TicketStatus.CLOSED.value: frozenset(),
}

ALLOWED_UPLOAD_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


# =============================================================================
# MODELS
# =============================================================================


class User(Base):
    """
    Student account.

    Created on first login, keyed by the identity provider's subject.
    Also mirrors the billing provider's subscription state.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("sessions_remaining >= 0", name="non_negative_sessions"),
        CheckConstraint(
            "(current_plan IS NULL) = (subscription_expires_at IS NULL)",
            name="plan_and_expiry_together",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    external_id: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    auth_provider: Mapped[str] = mapped_column(String(50), nullable=False, default="google")
    email: Mapped[Optional[str]] = mapped_column(
        CITEXT(), unique=True, index=True, nullable=True
    )
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(), nullable=True)

    # Billing
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    current_plan: Mapped[Optional[str]] = mapped_column(
        PGENUM("emergency", "basic", "premium", name="subscription_plan", create_type=False),
        nullable=True,
    )
    subscription_expires_at: Mapped[Optional[datetime]] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )
    sessions_remaining: Mapped[int] = mapped_column(nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), onupdate=func.now(), nullable=False
    )

    # Relationships
    chat_sessions: Mapped[list["ChatSession"]] = relationship(
        "ChatSession", back_populates="user"
    )
    uploaded_files: Mapped[list["UploadedFile"]] = relationship(
        "UploadedFile", back_populates="user"
    )
    performance_analytics: Mapped[list["PerformanceAnalytics"]] = relationship(
        "PerformanceAnalytics", back_populates="user"
    )
    support_tickets: Mapped[list["SupportTicket"]] = relationship(
        "SupportTicket", back_populates="user"
    )

    @property
    def subscription_status(self) -> SubscriptionStatus:
        """Standing derived from plan and expiry."""
        if self.current_plan is None or self.subscription_expires_at is None:
            return SubscriptionStatus.INACTIVE
        if datetime.now(timezone.utc) < self.subscription_expires_at:
            return SubscriptionStatus.ACTIVE
        return SubscriptionStatus.EXPIRED


class ChatSession(Base):
    """A tutoring conversation. Consumes one session credit when created."""

    __tablename__ = "chat_sessions"
    __table_args__ = (Index("idx_chat_sessions_user_updated_at", "user_id", "updated_at"),)

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, server_default=text("TRUE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), onupdate=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="chat_sessions")
    messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage", back_populates="session", order_by="ChatMessage.created_at"
    )


class ChatMessage(Base):
    """
    Individual message in a chat session.

    Append-only. Assistant messages carry generation metadata
    (model, timestamp, subject).
    """

    __tablename__ = "chat_messages"
    __table_args__ = (Index("idx_chat_messages_session_created", "session_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    session_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("chat_sessions.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(
        PGENUM("user", "assistant", name="chat_role", create_type=False),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    message_metadata: Mapped[Optional[dict]] = mapped_column("metadata", JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("clock_timestamp()"), nullable=False
    )

    # Relationships
    session: Mapped["ChatSession"] = relationship("ChatSession", back_populates="messages")


class UploadedFile(Base):
    """Study material uploaded by a user, stored in S3."""

    __tablename__ = "uploaded_files"
    __table_args__ = (
        Index("idx_uploaded_files_user_created", "user_id", "created_at"),
        CheckConstraint(
            f"file_size > 0 AND file_size <= {MAX_UPLOAD_BYTES}",
            name="valid_file_size",
        ),
        CheckConstraint(
            "mime_type IN ("
            + ", ".join(f"'{mime}'" for mime in ALLOWED_UPLOAD_TYPES)
            + ")",
            name="valid_mime_type",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    session_id: Mapped[Optional[UUID]] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("chat_sessions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    file_name: Mapped[str] = mapped_column(String(), nullable=False)
    file_path: Mapped[str] = mapped_column(String(), unique=True, nullable=False)  # S3 key
    file_size: Mapped[int] = mapped_column(nullable=False)
    mime_type: Mapped[str] = mapped_column(String(), nullable=False)
    is_processed: Mapped[bool] = mapped_column(default=False, server_default=text("FALSE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="uploaded_files")


class PerformanceAnalytics(Base):
    """Result of one assessment submission. Immutable once written."""

    __tablename__ = "performance_analytics"
    __table_args__ = (
        Index("idx_performance_user_subject", "user_id", "subject"),
        CheckConstraint("score >= 0 AND score <= 100", name="valid_score"),
        CheckConstraint(
            "correct_answers >= 0 AND correct_answers <= total_questions",
            name="valid_answer_counts",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    session_id: Mapped[Optional[UUID]] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("chat_sessions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    chapter: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    score: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    total_questions: Mapped[int] = mapped_column(nullable=False)
    correct_answers: Mapped[int] = mapped_column(nullable=False)
    weak_areas: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list, nullable=False)
    recommendations: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="performance_analytics")


class SupportTicket(Base):
    """Support request. May be submitted anonymously."""

    __tablename__ = "support_tickets"
    __table_args__ = (Index("idx_support_tickets_user_created", "user_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[Optional[UUID]] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        PGENUM("open", "in_progress", "resolved", "closed", name="ticket_status", create_type=False),
        nullable=False,
        default="open",
        server_default="open",
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), onupdate=func.now(), nullable=False
    )

    # Relationships
    user: Mapped[Optional["User"]] = relationship("User", back_populates="support_tickets")
