"""Plan data access: plans, plan types and plan configs."""
import logging
from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import joinedload

from benefitpoint.core.config import settings
from benefitpoint.core.exceptions import NotFoundError, ValidationError
from benefitpoint.models.plan import Plan, PlanType, PlanConfig, PlanStatus
from benefitpoint.services.base import StoreService
from benefitpoint.services.filters import PlanFilters, apply_plan_filters, paginate

logger = logging.getLogger(__name__)

# NOT NULL plan columns an update may not clear
PLAN_REQUIRED = {
    "carrier": "Carrier",
    "plan_type": "Plan type",
    "effective_date": "Effective date",
    "renewal_date": "Renewal date",
    "status": "Status",
}


def is_active_status(status: Optional[str]) -> bool:
    return (status or "").strip().lower() == PlanStatus.ACTIVE.value


class PlanService(StoreService):
    """Reads and writes plan rows. Rows are returned as-is, mapping happens in the repositories."""

    def fetch_plans(self, filters: Optional[PlanFilters] = None) -> Tuple[List[Plan], int]:
        """Plans with their account joined, newest effective date first."""
        with self.store_call("fetching plans"):
            query = apply_plan_filters(self.db.query(Plan), filters)
            total = query.count()
            query = query.options(joinedload(Plan.account)).order_by(
                Plan.effective_date.desc(), Plan.plan_id
            )
            if filters is not None:
                query = paginate(query, filters.offset, filters.limit)
            plans = query.all()
        return plans, total

    def fetch_plan_by_id(self, plan_id: int) -> Plan:
        with self.store_call(f"fetching plan {plan_id}"):
            plan = (
                self.db.query(Plan)
                .options(joinedload(Plan.account))
                .filter(Plan.plan_id == plan_id)
                .first()
            )
        if not plan:
            logger.error("Plan %s not found", plan_id)
            raise NotFoundError("Plan not found")
        return plan

    def fetch_plans_by_account_id(self, account_id: int) -> List[Plan]:
        with self.store_call(f"fetching plans for account {account_id}"):
            return (
                self.db.query(Plan)
                .options(joinedload(Plan.account))
                .filter(Plan.account_id == account_id)
                .order_by(Plan.effective_date.desc(), Plan.plan_id)
                .all()
            )

    def create_plan(self, plan_data: dict) -> Plan:
        if not plan_data.get("account_id"):
            raise ValidationError("Account ID is required")
        plan = Plan(**plan_data)
        plan.created_date = self.now()
        plan = self.save(plan, "creating plan")
        logger.info("Created plan %s (%s) for account %s", plan.plan_id, plan.plan_type, plan.account_id)
        return plan

    def update_plan(self, plan_id: int, updates: dict) -> Plan:
        plan = self.fetch_plan_by_id(plan_id)
        new_account_id = updates.get("account_id")
        if new_account_id is not None and new_account_id != plan.account_id:
            raise ValidationError("A plan's account cannot be changed")
        self.apply_updates(
            plan, updates, immutable=("plan_id", "account_id", "created_date"), required=PLAN_REQUIRED
        )
        plan.updated_date = self.now()
        return self.save(plan, f"updating plan {plan_id}")

    def update_plan_status(self, plan_id: int, status: str) -> Plan:
        plan = self.fetch_plan_by_id(plan_id)
        plan.status = status
        plan.updated_date = self.now()
        plan = self.save(plan, f"updating status of plan {plan_id}")
        logger.info("Plan %s status set to %s", plan_id, status)
        return plan

    def delete_plan(self, plan_id: int) -> None:
        """Soft delete: the row stays, status becomes cancelled."""
        self.update_plan_status(plan_id, PlanStatus.CANCELLED.value)

    def get_plans_summary(self, today: Optional[date] = None) -> Dict:
        today = today or date.today()
        window_end = today + timedelta(days=settings.RENEWAL_WINDOW_DAYS)
        with self.store_call("fetching plans for summary"):
            plans = self.db.query(Plan).all()

        return {
            "total_plans": len(plans),
            "active_plans": sum(1 for p in plans if is_active_status(p.status)),
            "upcoming_renewals": sum(
                1 for p in plans
                if is_active_status(p.status) and today <= p.renewal_date <= window_end
            ),
            "expired_plans": sum(1 for p in plans if (p.status or "").lower() == PlanStatus.EXPIRED.value),
            "plans_by_carrier": dict(Counter(p.carrier for p in plans)),
            "plans_by_type": dict(Counter(p.plan_type for p in plans)),
            "plans_by_status": dict(Counter(p.status for p in plans)),
        }

    def get_upcoming_renewals(self, days: int = 30, today: Optional[date] = None) -> List[Plan]:
        """Active plans renewing within [today, today + days], soonest first."""
        today = today or date.today()
        with self.store_call("fetching upcoming renewals"):
            return (
                self.db.query(Plan)
                .options(joinedload(Plan.account))
                .filter(
                    func.lower(Plan.status) == PlanStatus.ACTIVE.value,
                    Plan.renewal_date >= today,
                    Plan.renewal_date <= today + timedelta(days=days),
                )
                .order_by(Plan.renewal_date.asc(), Plan.plan_id)
                .all()
            )

    # ── Plan types ─────────────────────────────────────────────────

    def fetch_plan_types(self) -> List[PlanType]:
        with self.store_call("fetching plan types"):
            return (
                self.db.query(PlanType)
                .filter(PlanType.is_active == True)
                .order_by(PlanType.plan_type_name)
                .all()
            )

    def fetch_plan_type_by_id(self, plan_type_id: int) -> Optional[PlanType]:
        with self.store_call(f"fetching plan type {plan_type_id}"):
            return (
                self.db.query(PlanType)
                .filter(PlanType.plan_type_id == plan_type_id, PlanType.is_active == True)
                .first()
            )


class PlanConfigService(StoreService):
    """Plan configurations. Kept separate from the wizard's save step."""

    def create_config(self, config_data: dict, plan_id: Optional[int] = None) -> PlanConfig:
        config = PlanConfig(**config_data, plan_id=plan_id)
        config.created_at = self.now()
        return self.save(config, "creating plan config")

    def fetch_config_by_plan_id(self, plan_id: int) -> Optional[PlanConfig]:
        with self.store_call(f"fetching config for plan {plan_id}"):
            return (
                self.db.query(PlanConfig)
                .filter(PlanConfig.plan_id == plan_id)
                .order_by(PlanConfig.id.desc())
                .first()
            )
