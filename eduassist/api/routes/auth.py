"""
Authentication Routes

Endpoints:
- POST /auth/google - Exchange Google id_token for session
- POST /auth/logout - Clear session
- GET /auth/user - Get current user profile and subscription standing

Auth Flow:
1. Frontend performs Google OAuth flow and receives an id_token
2. Frontend POSTs id_token to /auth/google
3. Backend verifies id_token with Google's public keys
4. Backend upserts the user keyed by Google's subject claim
5. Backend returns JWT (in cookie and response body)
"""

import logging

from fastapi import APIRouter, HTTPException, Response, status
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from eduassist.api.deps import CurrentUser, DbSession, create_access_token
from eduassist.config import get_settings
from eduassist.db import repository
from eduassist.messages import t
from eduassist.schemas.auth import GoogleAuthRequest, TokenResponse
from eduassist.schemas.user import UserRead

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()

_GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def _cookie_options() -> dict:
    # Cross-domain deployments need samesite="none" + secure=True
    return {
        "httponly": True,
        "secure": settings.cookie_cross_domain or settings.environment != "development",
        "samesite": "none" if settings.cookie_cross_domain else "lax",
    }


@router.post("/google", response_model=TokenResponse)
async def google_login(
    request: GoogleAuthRequest,
    response: Response,
    db: DbSession,
) -> TokenResponse:
    """
    Exchange Google id_token for a session JWT.

    The id_token signature, expiry and audience are checked by google-auth.
    Unverified emails are not stored.
    """
    try:
        idinfo = google_id_token.verify_oauth2_token(
            request.id_token,
            google_requests.Request(),
            settings.google_client_id,
        )
        if idinfo.get("iss") not in _GOOGLE_ISSUERS:
            raise ValueError("Invalid issuer")
    except ValueError as e:
        logger.warning("Rejected Google id_token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=t("invalid_credentials"),
        ) from e

    email = idinfo.get("email")
    if email and not idinfo.get("email_verified", False):
        email = None

    user = await repository.upsert_user(
        db,
        external_id=idinfo["sub"],
        email=email.lower() if email else None,
        first_name=idinfo.get("given_name"),
        last_name=idinfo.get("family_name"),
        profile_image_url=idinfo.get("picture"),
    )
    await db.commit()
    logger.info("User %s signed in", user.id)

    access_token = create_access_token(user.id)
    expires_in = settings.jwt_expire_minutes * 60
    response.set_cookie(
        key="access_token",
        value=access_token,
        max_age=expires_in,
        **_cookie_options(),
    )

    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """
    Clear the authentication cookie.

    A JWT the client stored elsewhere stays valid until it expires.
    """
    response.delete_cookie(key="access_token", **_cookie_options())


@router.get("/user", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Return the current user, including derived subscription status."""
    return UserRead.model_validate(current_user)
