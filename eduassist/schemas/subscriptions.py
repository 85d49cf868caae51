"""Subscription and plan schemas."""

from pydantic import BaseModel, Field

from eduassist.db.models import SubscriptionPlan


class SubscriptionCreate(BaseModel):
    """Request to subscribe to a plan."""

    plan_id: str = Field(..., min_length=1, max_length=50)


class SubscriptionResponse(BaseModel):
    """Provider subscription id and the secret the client uses to finish payment."""

    subscription_id: str
    client_secret: str | None = None


class PlanRead(BaseModel):
    id: SubscriptionPlan
    name: str
    name_en: str
    price: int
    currency: str
    duration_days: int
    sessions: int
    features: list[str]
    is_special: bool
