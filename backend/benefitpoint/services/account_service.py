"""Account data access: accounts and the plans joined to them."""
import logging
from typing import List, Optional, Tuple
from sqlalchemy import func

from benefitpoint.core.exceptions import NotFoundError, ValidationError
from benefitpoint.models.account import Account
from benefitpoint.models.plan import Plan
from benefitpoint.services.base import StoreService
from benefitpoint.services.filters import (
    AccountFilters,
    PlanFilters,
    apply_account_filters,
    paginate,
    search_clause,
)
from benefitpoint.services.plan_service import PlanService

logger = logging.getLogger(__name__)


class AccountService(StoreService):

    def fetch_accounts(self, filters: Optional[AccountFilters] = None) -> Tuple[List[Account], int]:
        """Accounts ordered by name, plus the total before pagination."""
        with self.store_call("fetching accounts"):
            query = apply_account_filters(self.db.query(Account), filters)
            total = query.count()
            query = query.order_by(Account.account, Account.account_id)
            if filters is not None:
                query = paginate(query, filters.offset, filters.limit)
            accounts = query.all()
        return accounts, total

    def fetch_account_by_id(self, account_id: int) -> Account:
        with self.store_call(f"fetching account {account_id}"):
            account = self.db.query(Account).filter(Account.account_id == account_id).first()
        if not account:
            logger.error("Account %s not found", account_id)
            raise NotFoundError("Account not found")
        return account

    def fetch_account_by_name(self, account_name: str) -> Optional[Account]:
        """Exact (case-insensitive) name match first, otherwise the first partial match."""
        name = (account_name or "").strip()
        if not name:
            return None
        with self.store_call(f"fetching account by name {name!r}"):
            exact = (
                self.db.query(Account)
                .filter(func.lower(Account.account) == name.lower())
                .order_by(Account.account_id)
                .first()
            )
            if exact:
                return exact
            return (
                self.db.query(Account)
                .filter(search_clause(name, Account.account))
                .order_by(Account.account, Account.account_id)
                .first()
            )

    def fetch_plans_with_accounts(self, filters: Optional[PlanFilters] = None) -> Tuple[List[Plan], int]:
        return PlanService(self.db).fetch_plans(filters)

    def fetch_plans_by_account_id(self, account_id: int) -> List[Plan]:
        return PlanService(self.db).fetch_plans_by_account_id(account_id)

    def create_account(self, account_data: dict) -> Account:
        if not (account_data.get("account") or "").strip():
            raise ValidationError("Account name is required")
        account = Account(**account_data)
        account.created_date = self.now()
        account = self.save(account, "creating account")
        logger.info("Created account %s (%s)", account.account_id, account.account)
        return account

    def update_account(self, account_id: int, updates: dict) -> Account:
        account = self.fetch_account_by_id(account_id)
        self.apply_updates(
            account, updates, immutable=("account_id", "created_date"), required={"account": "Account name"}
        )
        account.updated_date = self.now()
        return self.save(account, f"updating account {account_id}")

    def delete_account(self, account_id: int) -> None:
        """Soft-delete stub: accounts have no active flag yet, so only the update stamp moves."""
        account = self.fetch_account_by_id(account_id)
        account.updated_date = self.now()
        self.save(account, f"deleting account {account_id}")
        logger.warning("Account %s delete requested; accounts are never removed", account_id)
