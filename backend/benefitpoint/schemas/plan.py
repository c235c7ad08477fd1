from pydantic import Field
from typing import Optional, List, Dict
from datetime import date, datetime
from benefitpoint.schemas.base import CamelModel


class PlanBase(CamelModel):
    carrier: str
    plan_type: str
    plan_type_id: Optional[int] = None
    commission_paid_by_carrier: Optional[str] = None
    billing: Optional[str] = None
    policy_group_number: Optional[str] = None
    effective_date: date
    renewal_date: date
    cancellation_date: Optional[date] = None


class PlanCreate(PlanBase):
    account_id: int
    status: str = "active"


class PlanUpdate(CamelModel):
    # account_id is immutable after creation
    carrier: Optional[str] = None
    plan_type: Optional[str] = None
    plan_type_id: Optional[int] = None
    commission_paid_by_carrier: Optional[str] = None
    billing: Optional[str] = None
    policy_group_number: Optional[str] = None
    effective_date: Optional[date] = None
    renewal_date: Optional[date] = None
    cancellation_date: Optional[date] = None
    status: Optional[str] = None


class PlanStatusUpdate(CamelModel):
    status: str = Field(..., min_length=1)


class PlanDto(PlanBase):
    plan_id: int
    account_id: int
    account_name: str
    account_office_division: str = ""
    account_primary_sales_lead: Optional[str] = None
    account_classification: Optional[str] = None
    plan_name: str
    status: str
    enrollment: Optional[str] = None
    annual_revenue: Optional[str] = None
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None


class PlanListResponse(CamelModel):
    plans: List[PlanDto]
    total_count: int
    message: str
    success: bool = True


class PlanSummary(CamelModel):
    total_plans: int
    active_plans: int
    upcoming_renewals: int
    expired_plans: int
    plans_by_carrier: Dict[str, int]
    plans_by_type: Dict[str, int]
    plans_by_status: Dict[str, int]


class PlanTypeDto(CamelModel):
    id: int
    name: str
    category: Optional[str] = None


class PlanConfigCreate(CamelModel):
    carrier: str
    billing_type: str
    plan_name: str
    policy_number: Optional[str] = None
    original_effective_date: Optional[date] = None
    effective_date: date
    commission_start_date: Optional[date] = None
    funding: str = "Fully Insured"


class PlanConfigDto(PlanConfigCreate):
    id: int
    plan_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
