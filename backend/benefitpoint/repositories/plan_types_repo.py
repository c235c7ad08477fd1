from typing import List, Optional
from sqlalchemy.orm import Session

from benefitpoint.repositories.base import repo_call
from benefitpoint.repositories.mappers import map_plan_type
from benefitpoint.schemas.plan import PlanTypeDto
from benefitpoint.services.plan_service import PlanService


class PlanTypesRepo:
    """Active plan types for the wizard's type picker."""

    def __init__(self, db: Session):
        self.service = PlanService(db)

    def find_all(self) -> List[PlanTypeDto]:
        with repo_call("to fetch plan types"):
            return [map_plan_type(row) for row in self.service.fetch_plan_types()]

    def find_by_id(self, plan_type_id: int) -> Optional[PlanTypeDto]:
        with repo_call(f"to fetch plan type {plan_type_id}"):
            row = self.service.fetch_plan_type_by_id(plan_type_id)
        return map_plan_type(row) if row else None
