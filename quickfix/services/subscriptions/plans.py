"""Premium plan catalogue."""
from dataclasses import dataclass
from typing import List

from quickfix.models.enums import SubscriptionPlan

CURRENCY = "INR"
DURATION_LABEL = "1 year"

BASIC_BENEFITS = ['Ad-free experience', 'Access to standard guides', 'Email support']
ADVANCED_BENEFITS = BASIC_BENEFITS + [
    'Exclusive advanced guides',
    'Priority email support',
    'Early access to new features',
]
PRO_BENEFITS = ADVANCED_BENEFITS + [
    'Access to all premium guides',
    '24/7 chat support',
    'Community Badge',
    'Personalized tips & tricks',
]


@dataclass(frozen=True)
class PlanInfo:
    plan: SubscriptionPlan
    display_name: str
    price_setting: str
    default_price: float
    benefits: List[str]
    currency: str = CURRENCY
    duration: str = DURATION_LABEL


PLAN_CATALOGUE = {
    SubscriptionPlan.basic: PlanInfo(SubscriptionPlan.basic, 'Basic', 'basicPlanPrice', 499, BASIC_BENEFITS),
    SubscriptionPlan.advanced: PlanInfo(
        SubscriptionPlan.advanced, 'Advanced', 'advancedPlanPrice', 999, ADVANCED_BENEFITS
    ),
    SubscriptionPlan.pro: PlanInfo(SubscriptionPlan.pro, 'Pro', 'proPlanPrice', 1999, PRO_BENEFITS),
}

# Plans a user can pay for; admin-granted is only created by an admin.
PURCHASABLE_PLANS = tuple(PLAN_CATALOGUE)


def plan_label(plan: SubscriptionPlan) -> str:
    """BASIC, PRO, ADMIN GRANTED, ..."""
    return plan.value.upper().replace('_', ' ').replace('-', ' ')
