from pydantic import Field
from typing import Optional, List, Dict
from datetime import datetime
from benefitpoint.schemas.base import CamelModel
from benefitpoint.schemas.plan import PlanDto


class AccountBase(CamelModel):
    account_name: str = Field(..., min_length=1)
    sba: Optional[int] = None
    state: Optional[str] = None
    commission_basis_1: Optional[str] = None
    commission_basis_2: Optional[str] = None
    flat_fee: Optional[float] = None
    percentage: Optional[float] = None


class AccountCreate(AccountBase):
    pass


class AccountUpdate(CamelModel):
    account_name: Optional[str] = None
    sba: Optional[int] = None
    state: Optional[str] = None
    commission_basis_1: Optional[str] = None
    commission_basis_2: Optional[str] = None
    flat_fee: Optional[float] = None
    percentage: Optional[float] = None


class AccountDto(AccountBase):
    account_id: int
    office_division: str = ""
    primary_sales_lead: Optional[str] = None
    classification: Optional[str] = None
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None


class AccountListResponse(CamelModel):
    accounts: List[AccountDto]
    total_count: int
    message: str
    success: bool = True


class AccountWithPlansDto(CamelModel):
    account_id: int
    account_name: str
    account_office_division: str = ""
    account_primary_sales_lead: Optional[str] = None
    account_classification: Optional[str] = None
    plans: List[PlanDto]
    total_plans: int
    upcoming_renewals: int


class AccountDashboardSummary(CamelModel):
    total_plans: int
    active_plans: int
    carrier_breakdown: Dict[str, int]
    plan_type_breakdown: Dict[str, int]


class AccountDashboardDto(CamelModel):
    account: Optional[AccountDto] = None
    plans: List[PlanDto]
    summary: AccountDashboardSummary
