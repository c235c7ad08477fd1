"""Accounts API: account directory, account plans and per-account dashboard."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from benefitpoint.core.database import get_db
from benefitpoint.repositories.accounts_repo import AccountsRepo
from benefitpoint.schemas.account import (
    AccountCreate,
    AccountDashboardDto,
    AccountDto,
    AccountListResponse,
    AccountUpdate,
    AccountWithPlansDto,
)
from benefitpoint.schemas.plan import PlanDto
from benefitpoint.services.filters import AccountFilters

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("", response_model=AccountListResponse)
def list_accounts(
    search: Optional[str] = Query(None, description="Search by account name or state"),
    state: Optional[str] = None,
    sba: Optional[int] = None,
    offset: Optional[int] = Query(None, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    filters = AccountFilters(search_term=search, state=state, sba=sba, offset=offset, limit=limit)
    accounts, total = AccountsRepo(db).find_all(filters)
    return AccountListResponse(
        accounts=accounts,
        total_count=total,
        message=f"Found {total} accounts",
    )


@router.get("/with-plans", response_model=List[AccountWithPlansDto])
def list_accounts_with_plans(db: Session = Depends(get_db)):
    return AccountsRepo(db).find_accounts_with_plans()


@router.get("/dashboard", response_model=AccountDashboardDto)
def account_dashboard(
    account_id: Optional[int] = Query(None, alias="accountId"),
    account: Optional[str] = Query(None, description="Legacy lookup by account name"),
    db: Session = Depends(get_db),
):
    """Plans and breakdowns for one account, by id or by name."""
    return AccountsRepo(db).get_account_dashboard(account_id=account_id, account_name=account)


@router.get("/{account_id}", response_model=AccountDto)
def get_account(account_id: int, db: Session = Depends(get_db)):
    return AccountsRepo(db).find_by_id(account_id)


@router.get("/{account_id}/plans", response_model=List[PlanDto])
def get_account_plans(account_id: int, db: Session = Depends(get_db)):
    repo = AccountsRepo(db)
    repo.find_by_id(account_id)
    return repo.find_plans_by_account_id(account_id)


@router.post("", response_model=AccountDto, status_code=201)
def create_account(payload: AccountCreate, db: Session = Depends(get_db)):
    account = AccountsRepo(db).create_account(payload)
    logger.info("Account %s created via API", account.account_id)
    return account


@router.patch("/{account_id}", response_model=AccountDto)
def update_account(account_id: int, payload: AccountUpdate, db: Session = Depends(get_db)):
    return AccountsRepo(db).update_account(account_id, payload)
