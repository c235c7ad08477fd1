"""Plans API: plan listing, search, summary, renewals and plan configs."""
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from benefitpoint.core.config import settings
from benefitpoint.core.database import get_db
from benefitpoint.core.exceptions import NotFoundError
from benefitpoint.repositories.accounts_repo import AccountsRepo
from benefitpoint.repositories.plans_repo import PlansRepo
from benefitpoint.schemas.plan import (
    PlanConfigCreate,
    PlanConfigDto,
    PlanCreate,
    PlanDto,
    PlanListResponse,
    PlanStatusUpdate,
    PlanSummary,
    PlanUpdate,
)
from benefitpoint.services.filters import PlanFilters
from benefitpoint.wizard.flow import cancel_plan_replacement

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/plans", tags=["plans"])


def plan_filters(
    search: Optional[str] = Query(None, description="Search carrier, plan type or policy number"),
    account_id: Optional[int] = Query(None, alias="accountId"),
    carrier: Optional[str] = None,
    plan_type: Optional[str] = Query(None, alias="planType"),
    status: Optional[str] = None,
    effective_date_from: Optional[date] = Query(None, alias="effectiveDateFrom"),
    effective_date_to: Optional[date] = Query(None, alias="effectiveDateTo"),
    renewal_date_from: Optional[date] = Query(None, alias="renewalDateFrom"),
    renewal_date_to: Optional[date] = Query(None, alias="renewalDateTo"),
    offset: Optional[int] = Query(None, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
) -> PlanFilters:
    return PlanFilters(
        search_term=search,
        account_id=account_id,
        carrier=carrier,
        plan_type=plan_type,
        status=status,
        effective_date_from=effective_date_from,
        effective_date_to=effective_date_to,
        renewal_date_from=renewal_date_from,
        renewal_date_to=renewal_date_to,
        offset=offset,
        limit=limit,
    )


@router.get("", response_model=PlanListResponse)
def list_plans(filters: PlanFilters = Depends(plan_filters), db: Session = Depends(get_db)):
    plans, total = PlansRepo(db).find_all(filters)
    return PlanListResponse(plans=plans, total_count=total, message=f"Found {total} plans")


@router.get("/search", response_model=PlanListResponse)
def search_plans(
    q: str = Query("", description="Matches account name, carrier, plan type or policy number"),
    filters: PlanFilters = Depends(plan_filters),
    db: Session = Depends(get_db),
):
    plans, total = AccountsRepo(db).search_plans_with_accounts(q, filters)
    return PlanListResponse(plans=plans, total_count=total, message=f"Found {total} plans")


@router.get("/summary", response_model=PlanSummary)
def plans_summary(db: Session = Depends(get_db)):
    return PlansRepo(db).summary()


@router.get("/upcoming-renewals", response_model=List[PlanDto])
def upcoming_renewals(
    days: int = Query(settings.RENEWAL_WINDOW_DAYS, ge=0, le=365),
    db: Session = Depends(get_db),
):
    return PlansRepo(db).upcoming_renewals(days)


@router.get("/{plan_id}", response_model=PlanDto)
def get_plan(plan_id: int, db: Session = Depends(get_db)):
    return PlansRepo(db).find_by_id(plan_id)


@router.post("", response_model=PlanDto, status_code=201)
def create_plan(payload: PlanCreate, db: Session = Depends(get_db)):
    AccountsRepo(db).find_by_id(payload.account_id)
    return PlansRepo(db).create(payload)


@router.patch("/{plan_id}", response_model=PlanDto)
def update_plan(plan_id: int, payload: PlanUpdate, db: Session = Depends(get_db)):
    return PlansRepo(db).update(plan_id, payload)


@router.patch("/{plan_id}/status", response_model=PlanDto)
def update_plan_status(plan_id: int, payload: PlanStatusUpdate, db: Session = Depends(get_db)):
    return PlansRepo(db).update_status(plan_id, payload.status)


@router.delete("/{plan_id}")
def delete_plan(plan_id: int, db: Session = Depends(get_db)):
    """Soft delete; the plan is marked cancelled."""
    PlansRepo(db).delete(plan_id)
    return {"message": "Plan cancelled", "planId": plan_id}


@router.post("/{plan_id}/cancel-replacement", response_model=PlanDto)
def cancel_replacement(plan_id: int, db: Session = Depends(get_db)):
    return cancel_plan_replacement(PlansRepo(db), plan_id)


@router.get("/{plan_id}/config", response_model=PlanConfigDto)
def get_plan_config(plan_id: int, db: Session = Depends(get_db)):
    config = PlansRepo(db).find_config(plan_id)
    if config is None:
        raise NotFoundError("Plan configuration not found")
    return config


@router.post("/{plan_id}/config", response_model=PlanConfigDto, status_code=201)
def save_plan_config(plan_id: int, payload: PlanConfigCreate, db: Session = Depends(get_db)):
    return PlansRepo(db).create_config(plan_id, payload)
