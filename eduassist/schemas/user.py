"""User schemas."""

from datetime import datetime
from uuid import UUID

from eduassist.db.models import SubscriptionStatus
from eduassist.schemas.base import BaseSchema


class UserRead(BaseSchema):
    """Schema for reading user data, including subscription standing."""

    id: UUID
    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    current_plan: str | None
    subscription_expires_at: datetime | None
    subscription_status: SubscriptionStatus
    sessions_remaining: int
    created_at: datetime
    updated_at: datetime
