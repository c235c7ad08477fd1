from benefitpoint.repositories.accounts_repo import AccountsRepo
from benefitpoint.repositories.carriers_repo import CarriersRepo
from benefitpoint.repositories.plan_types_repo import PlanTypesRepo
from benefitpoint.repositories.plans_repo import PlansRepo

__all__ = ["AccountsRepo", "CarriersRepo", "PlanTypesRepo", "PlansRepo"]
