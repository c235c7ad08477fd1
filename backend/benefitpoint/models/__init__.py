from benefitpoint.models.account import Account
from benefitpoint.models.carrier import Carrier
from benefitpoint.models.plan import Plan, PlanType, PlanConfig, PlanStatus

__all__ = [
    "Account",
    "Carrier",
    "Plan",
    "PlanType",
    "PlanConfig",
    "PlanStatus",
]
