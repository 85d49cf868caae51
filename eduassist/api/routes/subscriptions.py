"""Plan catalog and subscription routes."""

import logging

from fastapi import APIRouter, HTTPException, status

from eduassist.api.deps import CurrentUser, DbSession
from eduassist.config import get_settings
from eduassist.messages import t
from eduassist.schemas.subscriptions import PlanRead, SubscriptionCreate, SubscriptionResponse
from eduassist.services import payment_gateway
from eduassist.services.plans import PLAN_CATALOG, get_plan

logger = logging.getLogger(__name__)
router = APIRouter(tags=["subscriptions"])
settings = get_settings()


@router.get("/plans", response_model=list[PlanRead])
async def list_plans() -> list[PlanRead]:
    """The fixed plan catalog, in display order."""
    return [
        PlanRead(
            id=plan.id,
            name=plan.name,
            name_en=plan.name_en,
            price=plan.price,
            currency=settings.billing_currency,
            duration_days=plan.duration_days,
            sessions=plan.sessions,
            features=list(plan.features),
            is_special=plan.is_special,
        )
        for plan in PLAN_CATALOG.values()
    ]


@router.post("/create-subscription", response_model=SubscriptionResponse)
async def create_subscription(
    request: SubscriptionCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> SubscriptionResponse:
    """
    Start a subscription at the billing provider.

    Returns the provider's subscription id and the client secret used to
    confirm payment. Local plan, expiry and session credits are only written
    once the provider has accepted the subscription.
    """
    plan = get_plan(request.plan_id)
    if plan is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=t("invalid_plan"))
    if not current_user.email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=t("email_required"))

    result = await payment_gateway.create_subscription(db, current_user, plan)
    await db.commit()
    return result
