from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from benefitpoint.core.database import get_db
from benefitpoint.core.exceptions import NotFoundError
from benefitpoint.repositories.plan_types_repo import PlanTypesRepo
from benefitpoint.schemas.plan import PlanTypeDto

router = APIRouter(prefix="/api/plan-types", tags=["plan-types"])


@router.get("", response_model=List[PlanTypeDto])
def list_plan_types(db: Session = Depends(get_db)):
    return PlanTypesRepo(db).find_all()


@router.get("/{plan_type_id}", response_model=PlanTypeDto)
def get_plan_type(plan_type_id: int, db: Session = Depends(get_db)):
    plan_type = PlanTypesRepo(db).find_by_id(plan_type_id)
    if plan_type is None:
        raise NotFoundError("Plan type not found")
    return plan_type
