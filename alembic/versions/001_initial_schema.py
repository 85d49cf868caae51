"""Initial schema with all tables.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

This migration creates the complete EduAssist database schema:
- Extensions: uuid-ossp, citext
- Enums: subscription_plan, chat_role, ticket_status
- Tables: users, chat_sessions, chat_messages, uploaded_files, performance_analytics, support_tickets
- Triggers: updated_at auto-update function and triggers
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UPDATED_AT_TABLES = ["users", "chat_sessions", "support_tickets"]


def upgrade() -> None:
    # ==========================================================================
    # EXTENSIONS
    # ==========================================================================
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')
    op.execute('CREATE EXTENSION IF NOT EXISTS "citext"')

    # ==========================================================================
    # ENUMS
    # ==========================================================================
    subscription_plan = postgresql.ENUM(
        "emergency", "basic", "premium",
        name="subscription_plan",
        create_type=True,
    )
    subscription_plan.create(op.get_bind(), checkfirst=True)

    chat_role = postgresql.ENUM(
        "user", "assistant",
        name="chat_role",
        create_type=True,
    )
    chat_role.create(op.get_bind(), checkfirst=True)

    ticket_status = postgresql.ENUM(
        "open", "in_progress", "resolved", "closed",
        name="ticket_status",
        create_type=True,
    )
    ticket_status.create(op.get_bind(), checkfirst=True)

    # ==========================================================================
    # USERS TABLE
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("uuid_generate_v4()"), nullable=False),
        sa.Column("external_id", sa.String(255), nullable=False),
        sa.Column("auth_provider", sa.String(50), server_default="google", nullable=False),
        sa.Column("email", postgresql.CITEXT(), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("profile_image_url", sa.String(), nullable=True),
        sa.Column("stripe_customer_id", sa.String(255), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(255), nullable=True),
        sa.Column("current_plan", postgresql.ENUM(name="subscription_plan", create_type=False), nullable=True),
        sa.Column("subscription_expires_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("sessions_remaining", sa.Integer(), server_default="0", nullable=False),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_id"),
        sa.UniqueConstraint("email"),
        sa.CheckConstraint("sessions_remaining >= 0", name="non_negative_sessions"),
        sa.CheckConstraint(
            "(current_plan IS NULL) = (subscription_expires_at IS NULL)",
            name="plan_and_expiry_together",
        ),
    )
    op.create_index("idx_users_external_id", "users", ["external_id"])
    op.create_index("idx_users_email", "users", ["email"])

    # ==========================================================================
    # CHAT_SESSIONS TABLE
    # ==========================================================================
    op.create_table(
        "chat_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("uuid_generate_v4()"), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("TRUE"), nullable=False),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_chat_sessions_user_updated_at", "chat_sessions", ["user_id", "updated_at"])

    # ==========================================================================
    # CHAT_MESSAGES TABLE
    # ==========================================================================
    op.create_table(
        "chat_messages",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("uuid_generate_v4()"), nullable=False),
        sa.Column("session_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", postgresql.ENUM(name="chat_role", create_type=False), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        # clock_timestamp() keeps two messages written in one transaction ordered
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("clock_timestamp()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["session_id"], ["chat_sessions.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_chat_messages_session_created", "chat_messages", ["session_id", "created_at"])

    # ==========================================================================
    # UPLOADED_FILES TABLE
    # ==========================================================================
    op.create_table(
        "uploaded_files",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("uuid_generate_v4()"), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("session_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("file_name", sa.String(), nullable=False),
        sa.Column("file_path", sa.String(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(), nullable=False),
        sa.Column("is_processed", sa.Boolean(), server_default=sa.text("FALSE"), nullable=False),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["session_id"], ["chat_sessions.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("file_path"),
        sa.CheckConstraint("file_size > 0 AND file_size <= 10485760", name="valid_file_size"),
        sa.CheckConstraint(
            "mime_type IN ('application/pdf', 'application/msword', "
            "'application/vnd.openxmlformats-officedocument.wordprocessingml.document')",
            name="valid_mime_type",
        ),
    )
    op.create_index("idx_uploaded_files_user_created", "uploaded_files", ["user_id", "created_at"])
    op.create_index("ix_uploaded_files_session_id", "uploaded_files", ["session_id"])

    # ==========================================================================
    # PERFORMANCE_ANALYTICS TABLE
    # ==========================================================================
    op.create_table(
        "performance_analytics",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("uuid_generate_v4()"), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("session_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("chapter", sa.String(255), nullable=True),
        sa.Column("score", sa.Numeric(5, 2), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False),
        sa.Column("correct_answers", sa.Integer(), nullable=False),
        sa.Column("weak_areas", postgresql.ARRAY(sa.Text()), server_default=sa.text("'{}'"), nullable=False),
        sa.Column("recommendations", postgresql.ARRAY(sa.Text()), server_default=sa.text("'{}'"), nullable=False),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["session_id"], ["chat_sessions.id"], ondelete="SET NULL"),
        sa.CheckConstraint("score >= 0 AND score <= 100", name="valid_score"),
        sa.CheckConstraint(
            "correct_answers >= 0 AND correct_answers <= total_questions",
            name="valid_answer_counts",
        ),
    )
    op.create_index("idx_performance_user_subject", "performance_analytics", ["user_id", "subject"])
    op.create_index("ix_performance_analytics_session_id", "performance_analytics", ["session_id"])

    # ==========================================================================
    # SUPPORT_TICKETS TABLE
    # ==========================================================================
    op.create_table(
        "support_tickets",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("uuid_generate_v4()"), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", postgresql.ENUM(name="ticket_status", create_type=False), server_default="open", nullable=False),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_support_tickets_user_created", "support_tickets", ["user_id", "created_at"])

    # ==========================================================================
    # UPDATED_AT TRIGGER FUNCTION
    # ==========================================================================
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    for table in UPDATED_AT_TABLES:
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
        """)


def downgrade() -> None:
    for table in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")

    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    # Drop tables in reverse dependency order
    op.drop_table("support_tickets")
    op.drop_table("performance_analytics")
    op.drop_table("uploaded_files")
    op.drop_table("chat_messages")
    op.drop_table("chat_sessions")
    op.drop_table("users")

    # Drop enums
    op.execute("DROP TYPE IF EXISTS ticket_status")
    op.execute("DROP TYPE IF EXISTS chat_role")
    op.execute("DROP TYPE IF EXISTS subscription_plan")
