"""Accounts repository: account and plan DTOs, dashboard aggregates."""
import logging
from collections import Counter
from datetime import date, timedelta
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from benefitpoint.core.config import settings
from benefitpoint.core.exceptions import NotFoundError, ValidationError
from benefitpoint.repositories.base import repo_call
from benefitpoint.repositories.mappers import account_dto_to_row, map_account, map_plan
from benefitpoint.repositories.metrics import MetricsProvider, ZeroMetricsProvider
from benefitpoint.schemas.account import (
    AccountCreate,
    AccountDashboardDto,
    AccountDashboardSummary,
    AccountDto,
    AccountUpdate,
    AccountWithPlansDto,
)
from benefitpoint.schemas.dashboard import BucketCounts, DashboardSummary
from benefitpoint.schemas.plan import PlanDto
from benefitpoint.services.account_service import AccountService
from benefitpoint.services.filters import AccountFilters, PlanFilters
from benefitpoint.services.plan_service import is_active_status

logger = logging.getLogger(__name__)

# AccountCreate field -> accounts column
ACCOUNT_COLUMNS = {
    "account_name": "account",
    "sba": "sba",
    "state": "state",
    "commission_basis_1": "commission_1_basis",
    "commission_basis_2": "commission_2_basis",
    "flat_fee": "flat_fee",
    "percentage": "percentage",
}


def _account_columns(payload: dict) -> dict:
    return {ACCOUNT_COLUMNS[k]: v for k, v in payload.items() if k in ACCOUNT_COLUMNS}


def _page(items: list, filters: Optional[PlanFilters]) -> list:
    if filters is None or (filters.offset is None and filters.limit is None):
        return items
    start = filters.offset or 0
    return items[start:start + (filters.limit or settings.DEFAULT_PAGE_SIZE)]


def plan_matches(plan: PlanDto, term: str) -> bool:
    """Case-insensitive substring match on account name, carrier, plan type and policy number."""
    needle = term.strip().lower()
    haystack = (plan.account_name, plan.carrier, plan.plan_type, plan.policy_group_number)
    return any(needle in (value or "").lower() for value in haystack)


def bucket_plans(plans: List[PlanDto], today: date) -> BucketCounts:
    """Place each plan in at most one bucket.

    Precedence: renewal within the renewal window, then past renewal
    while still active, then effective within the new-business window.
    """
    renewal_end = today + timedelta(days=settings.RENEWAL_WINDOW_DAYS)
    new_business_start = today - timedelta(days=settings.NEW_BUSINESS_WINDOW_DAYS)
    counts = BucketCounts()

    for plan in plans:
        if today <= plan.renewal_date <= renewal_end:
            counts.up_for_renewal += 1
        elif plan.renewal_date < today and is_active_status(plan.status):
            counts.expired_no_action += 1
        elif new_business_start <= plan.effective_date <= today:
            counts.new_business += 1

    return counts


class AccountsRepo:

    def __init__(self, db: Session, metrics: Optional[MetricsProvider] = None):
        self.service = AccountService(db)
        self.metrics = metrics or ZeroMetricsProvider()

    def find_all(self, filters: Optional[AccountFilters] = None) -> Tuple[List[AccountDto], int]:
        with repo_call("to fetch accounts"):
            rows, total = self.service.fetch_accounts(filters)
        return [map_account(row) for row in rows], total

    def find_by_id(self, account_id: int) -> AccountDto:
        with repo_call(f"to fetch account with ID {account_id}"):
            return map_account(self.service.fetch_account_by_id(account_id))

    def find_by_name(self, account_name: str) -> Optional[AccountDto]:
        with repo_call(f"to look up account {account_name!r}"):
            row = self.service.fetch_account_by_name(account_name)
        return map_account(row) if row else None

    def find_plans_by_account_id(self, account_id: int) -> List[PlanDto]:
        with repo_call(f"to fetch plans for account {account_id}"):
            return [map_plan(row) for row in self.service.fetch_plans_by_account_id(account_id)]

    def find_all_plans_with_accounts(self, filters: Optional[PlanFilters] = None) -> Tuple[List[PlanDto], int]:
        with repo_call("to fetch plans with accounts"):
            rows, total = self.service.fetch_plans_with_accounts(filters)
        return [map_plan(row) for row in rows], total

    def search_plans_with_accounts(
        self, search_term: Optional[str], filters: Optional[PlanFilters] = None
    ) -> Tuple[List[PlanDto], int]:
        """Search across plans and their account names.

        The term is matched here rather than in the query so the joined
        account name takes part. Other filters go to the store; paging is
        applied to the matches.
        """
        store_filters = filters.without_search() if filters else None
        plans, _ = self.find_all_plans_with_accounts(store_filters)
        matches = plans
        if search_term and search_term.strip():
            matches = [plan for plan in plans if plan_matches(plan, search_term)]
            logger.debug("Search %r matched %s of %s plans", search_term, len(matches), len(plans))
        return _page(matches, filters), len(matches)

    def find_accounts_with_plans(self, today: Optional[date] = None) -> List[AccountWithPlansDto]:
        today = today or date.today()
        renewal_end = today + timedelta(days=settings.RENEWAL_WINDOW_DAYS)
        accounts, _ = self.find_all()
        plans, _ = self.find_all_plans_with_accounts()

        by_account = {}
        for plan in plans:
            by_account.setdefault(plan.account_id, []).append(plan)

        result = []
        for account in accounts:
            account_plans = by_account.get(account.account_id, [])
            result.append(
                AccountWithPlansDto(
                    account_id=account.account_id,
                    account_name=account.account_name,
                    account_office_division=account.office_division,
                    account_primary_sales_lead=account.primary_sales_lead,
                    account_classification=account.classification,
                    plans=account_plans,
                    total_plans=len(account_plans),
                    upcoming_renewals=sum(
                        1 for p in account_plans if today <= p.renewal_date <= renewal_end
                    ),
                )
            )
        return result

    def generate_dashboard_summary(self, today: Optional[date] = None) -> DashboardSummary:
        today = today or date.today()
        plans, _ = self.find_all_plans_with_accounts()
        buckets = bucket_plans(plans, today)

        return DashboardSummary(
            plans=buckets,
            products=buckets.model_copy(),
            record_assignments=self.metrics.record_assignments(len(plans)),
            activities=self.metrics.activities(len(plans)),
            requests=self.metrics.requests(len(plans)),
        )

    def get_account_dashboard(
        self, account_id: Optional[int] = None, account_name: Optional[str] = None
    ) -> AccountDashboardDto:
        """Plans and breakdowns for one account, looked up by id or (legacy) by name."""
        if account_id is not None:
            account = self.find_by_id(account_id)
        elif account_name and account_name.strip():
            account = self.find_by_name(account_name)
            if account is None:
                logger.error("No account matches %r", account_name)
                raise NotFoundError("Account not found")
        else:
            raise ValidationError("Account ID or account name is required")

        plans = self.find_plans_by_account_id(account.account_id)
        return AccountDashboardDto(
            account=account,
            plans=plans,
            summary=AccountDashboardSummary(
                total_plans=len(plans),
                active_plans=sum(1 for p in plans if is_active_status(p.status)),
                carrier_breakdown=dict(Counter(p.carrier for p in plans)),
                plan_type_breakdown=dict(Counter(p.plan_type for p in plans)),
            ),
        )

    def create_account(self, payload: AccountCreate) -> AccountDto:
        with repo_call("to create account"):
            row = self.service.create_account(_account_columns(payload.model_dump()))
        return map_account(row)

    def update_account(self, account_id: int, payload: AccountUpdate) -> AccountDto:
        current = self.find_by_id(account_id)
        merged = current.model_copy(update=payload.model_dump(exclude_unset=True))
        with repo_call(f"to update account {account_id}"):
            row = self.service.update_account(account_id, account_dto_to_row(merged))
        return map_account(row)
