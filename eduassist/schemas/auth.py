"""Authentication schemas."""

from pydantic import Field

from eduassist.schemas.base import BaseSchema


class GoogleAuthRequest(BaseSchema):
    """Request schema for Google OAuth login."""

    id_token: str = Field(..., description="Google OAuth id_token from frontend")


class TokenResponse(BaseSchema):
    """Response schema for successful authentication."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiry in seconds")
