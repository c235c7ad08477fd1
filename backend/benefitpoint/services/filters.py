"""Filter objects and their translation into SQLAlchemy predicates.

All filters are optional and conjunctive. Free-text search is a
case-insensitive substring match across the entity's name-like columns.
Date bounds are inclusive and each bound applies on its own.
Pagination is applied when either offset or limit is given.
"""
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Query

from benefitpoint.core.config import settings
from benefitpoint.models.account import Account
from benefitpoint.models.carrier import Carrier
from benefitpoint.models.plan import Plan


@dataclass
class AccountFilters:
    search_term: Optional[str] = None
    state: Optional[str] = None
    sba: Optional[int] = None
    offset: Optional[int] = None
    limit: Optional[int] = None


@dataclass
class PlanFilters:
    search_term: Optional[str] = None
    account_id: Optional[int] = None
    carrier: Optional[str] = None
    plan_type: Optional[str] = None
    status: Optional[str] = None
    effective_date_from: Optional[date] = None
    effective_date_to: Optional[date] = None
    renewal_date_from: Optional[date] = None
    renewal_date_to: Optional[date] = None
    offset: Optional[int] = None
    limit: Optional[int] = None

    def without_search(self) -> "PlanFilters":
        """Store-side filters for an in-memory search: no term and no paging."""
        return replace(self, search_term=None, offset=None, limit=None)


@dataclass
class CarrierFilters:
    search_term: Optional[str] = None
    is_active: Optional[bool] = None
    offset: Optional[int] = None
    limit: Optional[int] = None


def search_clause(term: str, *columns):
    pattern = f"%{term.strip()}%"
    return or_(*(column.ilike(pattern) for column in columns))


def paginate(query: Query, offset: Optional[int], limit: Optional[int]) -> Query:
    if offset is None and limit is None:
        return query
    return query.offset(offset or 0).limit(limit or settings.DEFAULT_PAGE_SIZE)


def apply_account_filters(query: Query, filters: Optional[AccountFilters]) -> Query:
    if filters is None:
        return query
    if filters.search_term and filters.search_term.strip():
        query = query.filter(search_clause(filters.search_term, Account.account, Account.state))
    if filters.state:
        query = query.filter(Account.state == filters.state)
    if filters.sba is not None:
        query = query.filter(Account.sba == filters.sba)
    return query


def apply_plan_filters(query: Query, filters: Optional[PlanFilters]) -> Query:
    if filters is None:
        return query
    if filters.search_term and filters.search_term.strip():
        query = query.filter(
            search_clause(filters.search_term, Plan.carrier, Plan.plan_type, Plan.policy_group_number)
        )
    if filters.account_id is not None:
        query = query.filter(Plan.account_id == filters.account_id)
    if filters.carrier:
        query = query.filter(Plan.carrier == filters.carrier)
    if filters.plan_type:
        query = query.filter(Plan.plan_type == filters.plan_type)
    if filters.status:
        query = query.filter(func.lower(Plan.status) == filters.status.strip().lower())
    if filters.effective_date_from:
        query = query.filter(Plan.effective_date >= filters.effective_date_from)
    if filters.effective_date_to:
        query = query.filter(Plan.effective_date <= filters.effective_date_to)
    if filters.renewal_date_from:
        query = query.filter(Plan.renewal_date >= filters.renewal_date_from)
    if filters.renewal_date_to:
        query = query.filter(Plan.renewal_date <= filters.renewal_date_to)
    return query


def apply_carrier_filters(query: Query, filters: Optional[CarrierFilters]) -> Query:
    if filters is None:
        return query
    if filters.search_term and filters.search_term.strip():
        query = query.filter(search_clause(filters.search_term, Carrier.company_name))
    if filters.is_active is not None:
        query = query.filter(Carrier.is_active == filters.is_active)
    return query
