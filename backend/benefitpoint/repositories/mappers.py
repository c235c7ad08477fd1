"""Row <-> DTO mapping.

One mapping function per entity. Fields the store does not model yet
(sales lead, classification, enrollment, revenue) come back as "TBD".
"""
from decimal import Decimal
from typing import Optional

from benefitpoint.models.account import Account
from benefitpoint.models.carrier import Carrier
from benefitpoint.models.plan import Plan, PlanType
from benefitpoint.schemas.account import AccountDto
from benefitpoint.schemas.carrier import CarrierDto
from benefitpoint.schemas.plan import PlanDto, PlanTypeDto

UNMODELLED = "TBD"
UNKNOWN_ACCOUNT = "Unknown Account"


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return float(value)
    return value


def plan_name_for(carrier: Optional[str], plan_type: Optional[str]) -> str:
    return f"{carrier or ''} {plan_type or ''}".strip()


def map_account(account: Account) -> AccountDto:
    return AccountDto(
        account_id=account.account_id,
        account_name=account.account,
        sba=account.sba,
        state=account.state,
        office_division=account.state or "",
        commission_basis_1=account.commission_1_basis,
        commission_basis_2=account.commission_2_basis,
        flat_fee=_to_float(account.flat_fee),
        percentage=_to_float(account.percentage),
        primary_sales_lead=UNMODELLED,
        classification=UNMODELLED,
        created_date=account.created_date,
        updated_date=account.updated_date,
    )


def map_plan(plan: Plan) -> PlanDto:
    """Plan row (account joined when loaded) to its DTO."""
    account = plan.account
    return PlanDto(
        plan_id=plan.plan_id,
        account_id=plan.account_id,
        account_name=account.account if account else UNKNOWN_ACCOUNT,
        account_office_division=(account.state or "") if account else "",
        account_primary_sales_lead=UNMODELLED,
        account_classification=UNMODELLED,
        plan_name=plan_name_for(plan.carrier, plan.plan_type),
        carrier=plan.carrier,
        plan_type=plan.plan_type,
        plan_type_id=plan.plan_type_id,
        commission_paid_by_carrier=plan.commission_paid_by_carrier,
        billing=plan.billing,
        policy_group_number=plan.policy_group_number,
        effective_date=plan.effective_date,
        renewal_date=plan.renewal_date,
        cancellation_date=plan.cancellation_date,
        status=plan.status,
        enrollment=UNMODELLED,
        annual_revenue=UNMODELLED,
        created_date=plan.created_date,
        updated_date=plan.updated_date,
    )


def map_carrier(carrier: Carrier) -> CarrierDto:
    return CarrierDto(
        carrier_id=carrier.carrier_id,
        company_name=carrier.company_name,
        is_active=bool(carrier.is_active),
        created_at=carrier.created_at,
        updated_at=carrier.updated_at,
    )


def map_plan_type(plan_type: PlanType) -> PlanTypeDto:
    return PlanTypeDto(
        id=plan_type.plan_type_id,
        name=plan_type.plan_type_name,
        category=plan_type.category,
    )


def plan_dto_to_row(dto: PlanDto) -> dict:
    """Column values for a plan DTO. Derived and unmodelled fields are dropped."""
    return {
        "plan_id": dto.plan_id,
        "account_id": dto.account_id,
        "carrier": dto.carrier,
        "plan_type": dto.plan_type,
        "plan_type_id": dto.plan_type_id,
        "commission_paid_by_carrier": dto.commission_paid_by_carrier,
        "billing": dto.billing,
        "policy_group_number": dto.policy_group_number,
        "effective_date": dto.effective_date,
        "renewal_date": dto.renewal_date,
        "cancellation_date": dto.cancellation_date,
        "status": dto.status,
    }


def account_dto_to_row(dto: AccountDto) -> dict:
    return {
        "account_id": dto.account_id,
        "account": dto.account_name,
        "state": dto.state,
        "sba": dto.sba,
        "commission_1_basis": dto.commission_basis_1,
        "commission_2_basis": dto.commission_basis_2,
        "flat_fee": dto.flat_fee,
        "percentage": dto.percentage,
    }
