"""Subscription plan catalog shared by billing and quota logic."""

from dataclasses import dataclass
from types import MappingProxyType

from eduassist.db.models import SubscriptionPlan


@dataclass(frozen=True)
class PlanDetails:
    """Fixed terms of a plan. ``price`` is in major currency units."""

    id: SubscriptionPlan
    name: str
    name_en: str
    price: int
    duration_days: int
    sessions: int
    features: tuple[str, ...]
    is_special: bool = False

    @property
    def unit_amount(self) -> int:
        """Price in minor units (halalas) as the billing provider expects."""
        return self.price * 100


PLAN_CATALOG: MappingProxyType[SubscriptionPlan, PlanDetails] = MappingProxyType({
    SubscriptionPlan.EMERGENCY: PlanDetails(
        id=SubscriptionPlan.EMERGENCY,
        name="الخطة الطارئة",
        name_en="Emergency Plan",
        price=20,
        duration_days=30,
        sessions=2,
        features=("بحوث مخصصة", "تصميم عروض تقديمية", "دعم أولوية"),
        is_special=True,
    ),
    SubscriptionPlan.BASIC: PlanDetails(
        id=SubscriptionPlan.BASIC,
        name="الخطة الأساسية",
        name_en="Basic Plan",
        price=35,
        duration_days=90,
        sessions=4,
        features=("دردشة مع المساعد الذكي", "تقارير تحليل الضعف"),
    ),
    SubscriptionPlan.PREMIUM: PlanDetails(
        id=SubscriptionPlan.PREMIUM,
        name="الخطة المميزة",
        name_en="Premium Plan",
        price=60,
        duration_days=180,
        sessions=6,
        features=("جميع مميزات الأساسية", "تحليلات متقدمة", "رفع ملفات غير محدود"),
    ),
})


def get_plan(plan_id: str) -> PlanDetails | None:
    """Look up a plan by its id, or None if the id isn't one of the catalog's."""
    try:
        return PLAN_CATALOG[SubscriptionPlan(plan_id)]
    except ValueError:
        return None
