"""
Stripe billing adapter.

Creates customers and subscriptions at Stripe and mirrors a confirmed
subscription (plan, expiry, session credits) onto the local user record.
Local subscription state is only written after Stripe has accepted the
subscription.
"""

import logging
from datetime import datetime, timedelta, timezone

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from eduassist.config import get_settings
from eduassist.db import repository
from eduassist.db.models import User
from eduassist.errors import PaymentGatewayError
from eduassist.messages import t
from eduassist.schemas.subscriptions import SubscriptionResponse
from eduassist.services.plans import PlanDetails

logger = logging.getLogger(__name__)
settings = get_settings()

_EXPAND = ["latest_invoice.confirmation_secret"]


def _client_secret(subscription) -> str | None:
    """The invoice confirmation secret off a subscription expanded with ``_EXPAND``."""
    invoice = subscription.get("latest_invoice")
    if not invoice or isinstance(invoice, str):
        return None
    secret = invoice.get("confirmation_secret")
    if not secret or isinstance(secret, str):
        return None
    return secret.get("client_secret")


class PaymentGateway:
    """Wrapper around the Stripe API for plan subscriptions."""

    def __init__(self, api_key: str | None = None):
        self.client = stripe.StripeClient(api_key or settings.stripe_secret_key)

    async def create_subscription(
        self,
        db: AsyncSession,
        user: User,
        plan: PlanDetails,
    ) -> SubscriptionResponse:
        """
        Subscribe ``user`` to ``plan``.

        If the user already has an active Stripe subscription its existing
        client secret is returned and nothing else changes. The caller must
        have checked that the user has an email address.

        Raises:
            PaymentGatewayError: If any Stripe call fails
        """
        try:
            if user.stripe_subscription_id:
                existing = await self.client.subscriptions.retrieve_async(
                    user.stripe_subscription_id,
                    params={"expand": _EXPAND},
                )
                if existing.get("status") == "active":
                    logger.info("User %s already has active subscription %s", user.id, existing["id"])
                    return SubscriptionResponse(
                        subscription_id=existing["id"],
                        client_secret=_client_secret(existing),
                    )

            customer_id = user.stripe_customer_id
            if not customer_id:
                name = f"{user.first_name or ''} {user.last_name or ''}".strip()
                customer = await self.client.customers.create_async(
                    params={
                        "email": user.email,
                        "name": name,
                        "metadata": {"user_id": str(user.id)},
                    }
                )
                customer_id = customer["id"]
                await repository.update_user_stripe_info(db, user.id, customer_id=customer_id)
                await db.commit()

            subscription = await self.client.subscriptions.create_async(
                params={
                    "customer": customer_id,
                    "items": [{
                        "price_data": {
                            "currency": settings.billing_currency,
                            "product": settings.stripe_product_id,
                            "recurring": {"interval": "month"},
                            "unit_amount": plan.unit_amount,
                        },
                    }],
                    "payment_behavior": "default_incomplete",
                    "expand": _EXPAND,
                    "metadata": {"user_id": str(user.id), "plan_id": plan.id.value},
                }
            )
        except stripe.StripeError as e:
            raise PaymentGatewayError(t("subscription_failed")) from e

        expires_at = datetime.now(timezone.utc) + timedelta(days=plan.duration_days)
        await repository.update_user_stripe_info(
            db, user.id, customer_id=customer_id, subscription_id=subscription["id"]
        )
        await repository.update_user_subscription(
            db,
            user.id,
            plan=plan.id.value,
            expires_at=expires_at,
            sessions=plan.sessions,
        )
        logger.info(
            "Created subscription %s for user %s on plan %s (expires %s)",
            subscription["id"], user.id, plan.id.value, expires_at.isoformat(),
        )
        return SubscriptionResponse(
            subscription_id=subscription["id"],
            client_secret=_client_secret(subscription),
        )


# Singleton instance
payment_gateway = PaymentGateway()
