"""Pytest configuration and fixtures."""

import os

# Required settings must exist before the app (and its service singletons) import
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test-access-key")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test-secret")
os.environ.setdefault("AWS_S3_BUCKET", "test-bucket")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")
os.environ.setdefault("STRIPE_PRODUCT_ID", "prod_test_123")

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from eduassist.api.deps import get_current_user
from eduassist.db.models import ChatMessage, ChatSession, SupportTicket, User
from eduassist.db.session import get_db
from eduassist.main import app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def mock_db() -> AsyncMock:
    return AsyncMock(spec=AsyncSession)


@pytest.fixture(autouse=True)
def override_get_db(mock_db):
    async def _override():
        yield mock_db

    app.dependency_overrides[get_db] = _override
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def make_user():
    def _make(**overrides) -> User:
        now = datetime.now(timezone.utc)
        values = {
            "id": uuid4(),
            "external_id": f"google-{uuid4().hex}",
            "auth_provider": "google",
            "email": "student@example.com",
            "first_name": "Sara",
            "last_name": "Ahmed",
            "profile_image_url": None,
            "stripe_customer_id": None,
            "stripe_subscription_id": None,
            "current_plan": "basic",
            "subscription_expires_at": now + timedelta(days=30),
            "sessions_remaining": 3,
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        return User(**values)

    return _make


@pytest.fixture
def user(make_user) -> User:
    return make_user()


@pytest.fixture
def auth_as(user):
    """Make requests run as ``user`` (or another user passed in)."""

    def _auth(as_user: User = user) -> User:
        app.dependency_overrides[get_current_user] = lambda: as_user
        return as_user

    return _auth


@pytest.fixture
def make_session():
    def _make(user_id, **overrides) -> ChatSession:
        now = datetime.now(timezone.utc)
        values = {
            "id": uuid4(),
            "user_id": user_id,
            "title": "Calculus review",
            "subject": "Mathematics",
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        return ChatSession(**values)

    return _make


@pytest.fixture
def make_message():
    def _make(session_id, role: str, content: str, metadata: dict | None = None) -> ChatMessage:
        return ChatMessage(
            id=uuid4(),
            session_id=session_id,
            role=role,
            content=content,
            message_metadata=metadata,
            created_at=datetime.now(timezone.utc),
        )

    return _make


@pytest.fixture
def make_ticket():
    def _make(**overrides) -> SupportTicket:
        now = datetime.now(timezone.utc)
        values = {
            "id": uuid4(),
            "user_id": None,
            "first_name": "Omar",
            "last_name": "Hassan",
            "email": "omar@example.com",
            "category": "billing",
            "subject": "Payment question",
            "message": "My card was charged twice.",
            "status": "open",
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        return SupportTicket(**values)

    return _make
