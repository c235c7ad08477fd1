"""Plans repository: plan DTOs, plan summary, renewals and plan configs."""
import logging
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from benefitpoint.repositories.base import repo_call
from benefitpoint.repositories.mappers import map_plan, plan_dto_to_row
from benefitpoint.schemas.plan import (
    PlanConfigCreate,
    PlanConfigDto,
    PlanCreate,
    PlanDto,
    PlanSummary,
    PlanUpdate,
)
from benefitpoint.services.filters import PlanFilters
from benefitpoint.services.plan_service import PlanConfigService, PlanService

logger = logging.getLogger(__name__)


class PlansRepo:

    def __init__(self, db: Session):
        self.service = PlanService(db)
        self.configs = PlanConfigService(db)

    def find_all(self, filters: Optional[PlanFilters] = None) -> Tuple[List[PlanDto], int]:
        with repo_call("to fetch plans"):
            rows, total = self.service.fetch_plans(filters)
        return [map_plan(row) for row in rows], total

    def find_by_id(self, plan_id: int) -> PlanDto:
        with repo_call(f"to fetch plan with ID {plan_id}"):
            return map_plan(self.service.fetch_plan_by_id(plan_id))

    def find_by_account_id(self, account_id: int) -> List[PlanDto]:
        with repo_call(f"to fetch plans for account {account_id}"):
            return [map_plan(row) for row in self.service.fetch_plans_by_account_id(account_id)]

    def create(self, payload: PlanCreate) -> PlanDto:
        with repo_call("to create plan"):
            return map_plan(self.service.create_plan(payload.model_dump()))

    def update(self, plan_id: int, payload: PlanUpdate) -> PlanDto:
        current = self.find_by_id(plan_id)
        merged = current.model_copy(update=payload.model_dump(exclude_unset=True))
        with repo_call(f"to update plan {plan_id}"):
            row = self.service.update_plan(plan_id, plan_dto_to_row(merged))
        return map_plan(row)

    def update_status(self, plan_id: int, status: str) -> PlanDto:
        with repo_call(f"to update status of plan {plan_id}"):
            return map_plan(self.service.update_plan_status(plan_id, status))

    def delete(self, plan_id: int) -> None:
        with repo_call(f"to delete plan {plan_id}"):
            self.service.delete_plan(plan_id)

    def summary(self, today: Optional[date] = None) -> PlanSummary:
        with repo_call("to build plan summary"):
            return PlanSummary(**self.service.get_plans_summary(today))

    def upcoming_renewals(self, days: int = 30, today: Optional[date] = None) -> List[PlanDto]:
        with repo_call(f"to fetch renewals in the next {days} days"):
            return [map_plan(row) for row in self.service.get_upcoming_renewals(days, today)]

    def create_config(self, plan_id: int, payload: PlanConfigCreate) -> PlanConfigDto:
        with repo_call(f"to save config for plan {plan_id}"):
            self.service.fetch_plan_by_id(plan_id)
            config = self.configs.create_config(payload.model_dump(), plan_id=plan_id)
        return PlanConfigDto.model_validate(config)

    def find_config(self, plan_id: int) -> Optional[PlanConfigDto]:
        with repo_call(f"to fetch config for plan {plan_id}"):
            config = self.configs.fetch_config_by_plan_id(plan_id)
        return PlanConfigDto.model_validate(config) if config else None
