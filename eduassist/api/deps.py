"""
FastAPI Dependencies for Authentication and Authorization.

Key patterns:
1. get_current_user: Extracts and validates JWT, returns User object
2. get_optional_user: Same, but returns None for anonymous callers
3. Ownership checks happen in the route, after the row is fetched by id

Security model:
- JWT stored in HttpOnly cookie (recommended) or Authorization header
- A row owned by someone else is reported exactly like a missing row
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

from fastapi import Cookie, Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from eduassist.config import get_settings
from eduassist.db import repository
from eduassist.db.models import User
from eduassist.db.session import get_db
from eduassist.messages import t

settings = get_settings()


# =============================================================================
# JWT UTILITIES
# =============================================================================


def create_access_token(user_id: UUID) -> str:
    """Signed session token. Claims are only ``sub`` (the user id) and ``exp``."""
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    return jwt.encode(
        {"sub": str(user_id), "exp": expires_at},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> UUID | None:
    """The user id from a valid token; None for bad signatures, expiry or junk."""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return UUID(claims["sub"])
    except (JWTError, KeyError, TypeError, ValueError):
        return None


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_optional_token(
    authorization: Annotated[str | None, Header()] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> str | None:
    """
    Extract JWT token from request, if any.

    Supports two methods (in order of preference):
    1. HttpOnly cookie named 'access_token'
    2. Authorization header: 'Bearer <token>'
    """
    if access_token:
        return access_token

    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    return None


async def get_token_from_request(
    token: Annotated[str | None, Depends(get_optional_token)],
) -> str:
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=t("not_authenticated"),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_request)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Validate JWT and return the current authenticated user.

    Raises 401 if:
    - Token is missing, invalid, or expired
    - User no longer exists in database
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=t("invalid_credentials"),
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    user = await repository.get_user(db, user_id)
    if user is None:
        raise credentials_exception

    return user


async def get_optional_user(
    token: Annotated[str | None, Depends(get_optional_token)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """Resolve the caller if a valid token is present. Never raises for bad tokens."""
    if token is None:
        return None
    user_id = decode_access_token(token)
    if user_id is None:
        return None
    return await repository.get_user(db, user_id)


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# AUTHORIZATION HELPERS
# =============================================================================


def verify_ownership_or_404(resource: object | None, current_user: User, message_key: str = "not_found") -> None:
    """
    Combined check: resource exists AND user owns it.

    Returns 404 with the same body for both cases:

        session = await repository.get_chat_session(db, session_id)
        verify_ownership_or_404(session, current_user, "session_not_found")
        # If we get here, the session exists and the user owns it
    """
    if resource is None or getattr(resource, "user_id", None) != current_user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=t(message_key))
