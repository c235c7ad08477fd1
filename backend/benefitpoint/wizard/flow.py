"""Add/replace plan wizard.

Steps run select target plan (replacements only) -> select plan type ->
configure -> review -> saved. Each transition takes a WizardSession and
returns the next one; nothing is stored between steps.

The replacement save only records the new plan's type. The configuration
entered in the wizard is not written to the plan row, and the original plan
keeps its status.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from benefitpoint.core.config import settings
from benefitpoint.core.exceptions import ValidationError
from benefitpoint.models.plan import PlanStatus
from benefitpoint.repositories.accounts_repo import AccountsRepo
from benefitpoint.repositories.base import repo_call
from benefitpoint.repositories.plan_types_repo import PlanTypesRepo
from benefitpoint.repositories.plans_repo import PlansRepo
from benefitpoint.schemas.base import CamelModel
from benefitpoint.schemas.plan import PlanCreate, PlanDto
from benefitpoint.services.plan_service import is_active_status
from benefitpoint.wizard.session import (
    OriginalPlanSnapshot,
    PlanConfiguration,
    ReplacementOptions,
    WizardSession,
    WizardStep,
)

logger = logging.getLogger(__name__)

PREVIOUS_STEP = {
    WizardStep.SELECT_TARGET_PLAN: WizardStep.SELECT_TARGET_PLAN,
    WizardStep.CONFIGURE_PLAN: WizardStep.SELECT_PLAN_TYPE,
    WizardStep.REVIEW: WizardStep.CONFIGURE_PLAN,
}


def _default_plan_name(carrier: str, plan_type_name: Optional[str]) -> Optional[str]:
    return f"{carrier} {plan_type_name}" if plan_type_name else None


class ReplacePlanConfig(CamelModel):
    original_plan_id: Optional[int] = None
    account_id: Optional[int] = None
    account_name: Optional[str] = None
    replacement_plan_type_id: Optional[int] = None
    replacement_plan_type_name: Optional[str] = None
    non_brokered: bool = False
    include_splits: str = "Yes"
    include_contributions: str = "No"
    include_eligibility_rules: str = "No"


def determine_status(effective_date, today: Optional[date] = None) -> str:
    """Active once the effective date has arrived, pending before that."""
    if effective_date is None:
        return PlanStatus.ACTIVE.value
    if isinstance(effective_date, datetime):
        eff_date = effective_date.date()
    elif isinstance(effective_date, date):
        eff_date = effective_date
    else:
        return PlanStatus.ACTIVE.value

    today = today or date.today()
    if eff_date <= today:
        return PlanStatus.ACTIVE.value
    else:
        return PlanStatus.PENDING.value


def default_replacement_options(plan: PlanDto) -> ReplacementOptions:
    """Starting toggles for a replacement, guessed from the plan being replaced."""
    type_name = (plan.plan_type or "").lower()
    return ReplacementOptions(
        non_brokered=(plan.commission_paid_by_carrier or "") in ("No", "N/A"),
        include_splits="Yes" if "commission" in type_name else "No",
        include_contributions="Yes" if ("401" in type_name or "retirement" in type_name) else "No",
        include_eligibility_rules="Yes" if is_active_status(plan.status) else "No",
    )


def snapshot_plan(plan: PlanDto) -> OriginalPlanSnapshot:
    return OriginalPlanSnapshot(
        original_plan_id=plan.plan_id,
        original_plan_name=plan.plan_name,
        original_carrier=plan.carrier,
        original_plan_type=plan.plan_type,
        original_status=plan.status,
        original_effective_date=plan.effective_date,
        original_renewal_date=plan.renewal_date,
        original_cancellation_date=plan.cancellation_date,
        original_commission_paid_by_carrier=plan.commission_paid_by_carrier,
        original_policy_group_number=plan.policy_group_number,
        original_billing=plan.billing,
        original_account_name=plan.account_name,
        original_account_office_division=plan.account_office_division,
        original_created_date=plan.created_date,
        original_updated_date=plan.updated_date,
    )


def validate_replacement_plan(plans: PlansRepo, config: ReplacePlanConfig) -> dict:
    """Check the ids and type name, then that the original plan still exists."""
    if not config.original_plan_id:
        raise ValidationError("Original plan ID is required")
    if not (config.replacement_plan_type_name or "").strip():
        raise ValidationError("Replacement plan type is required")
    if not config.account_id:
        raise ValidationError("Account ID is required")

    plans.find_by_id(config.original_plan_id)
    return {"valid": True, "message": "Replacement plan configuration is valid"}


def create_replacement_plan(
    plans: PlansRepo, config: ReplacePlanConfig, today: Optional[date] = None
) -> PlanDto:
    """Insert the placeholder plan that replaces config.original_plan_id.

    Carrier is left as "TBD" and the plan waits in pending_configuration
    until it is configured.
    """
    today = today or date.today()
    with repo_call("to create replacement plan"):
        validate_replacement_plan(plans, config)
        original = plans.find_by_id(config.original_plan_id)

        plan = plans.create(
            PlanCreate(
                account_id=config.account_id,
                carrier="TBD",
                plan_type=config.replacement_plan_type_name,
                plan_type_id=config.replacement_plan_type_id,
                effective_date=today,
                renewal_date=today + timedelta(days=settings.REPLACEMENT_TERM_DAYS),
                status=PlanStatus.PENDING_CONFIGURATION.value,
            )
        )
    logger.info(
        "Plan %s created to replace plan %s (%s) for account %s",
        plan.plan_id, original.plan_id, original.plan_name, config.account_id,
    )
    return plan


def cancel_plan_replacement(plans: PlansRepo, plan_id: int) -> PlanDto:
    with repo_call(f"to cancel replacement for plan {plan_id}"):
        return plans.update_status(plan_id, PlanStatus.CANCELLED.value)


class PlanWizard:
    """Step transitions for the add/replace plan wizard."""

    def __init__(self, db: Session, today: Optional[date] = None):
        self.accounts = AccountsRepo(db)
        self.plans = PlansRepo(db)
        self.plan_types = PlanTypesRepo(db)
        self._today = today

    def today(self) -> date:
        return self._today or date.today()

    @staticmethod
    def _expect(session: WizardSession, *steps: WizardStep) -> None:
        if session.step not in steps:
            expected = ", ".join(step.value for step in steps)
            raise ValidationError(f"Wizard is at step {session.step.value}, expected {expected}")

    # ── Entry ──────────────────────────────────────────────────────

    def start_new_plan(self, account: Optional[str] = None, account_id: Optional[int] = None) -> WizardSession:
        if account_id is not None:
            account = self.accounts.find_by_id(account_id).account_name
        elif account:
            match = self.accounts.find_by_name(account)
            if match is not None:
                account, account_id = match.account_name, match.account_id
        return WizardSession(
            step=WizardStep.SELECT_PLAN_TYPE,
            account=account,
            account_id=account_id,
            config=PlanConfiguration(origination_reason="New Business"),
        )

    def start_replacement(self, plan_id: int, account_id: Optional[int] = None) -> WizardSession:
        plan = self.plans.find_by_id(plan_id)
        if account_id is not None and account_id != plan.account_id:
            raise ValidationError(f"Plan {plan_id} does not belong to account {account_id}")
        logger.info("Starting replacement of plan %s for account %s", plan_id, plan.account_id)
        return WizardSession(
            step=WizardStep.SELECT_TARGET_PLAN,
            is_replacement=True,
            account=plan.account_name,
            account_id=plan.account_id,
            original=snapshot_plan(plan),
            options=default_replacement_options(plan),
            config=PlanConfiguration(origination_reason="Replacement"),
        )

    # ── Transitions ────────────────────────────────────────────────

    def select_target_plan(self, session: WizardSession, **overrides) -> WizardSession:
        """Confirm the plan being replaced, applying any toggle overrides."""
        self._expect(session, WizardStep.SELECT_TARGET_PLAN)
        if session.original is None:
            raise ValidationError("Original plan ID is required")

        applied = {k: v for k, v in overrides.items() if v is not None}
        options = session.options.merged(applied)
        return session.model_copy(update={"options": options, "step": WizardStep.SELECT_PLAN_TYPE})

    def select_plan_type(
        self, session: WizardSession, plan_type_name: Optional[str] = None, plan_type_id: Optional[int] = None
    ) -> WizardSession:
        self._expect(session, WizardStep.SELECT_PLAN_TYPE)
        if not (plan_type_name or "").strip() and plan_type_id is not None:
            plan_type = self.plan_types.find_by_id(plan_type_id)
            plan_type_name = plan_type.name if plan_type else None
        if not (plan_type_name or "").strip():
            raise ValidationError("Plan type is required")

        return session.model_copy(update={
            "plan_type_name": plan_type_name.strip(),
            "plan_type_id": plan_type_id,
            "config": self._prefill(session, plan_type_name.strip()),
            "step": WizardStep.CONFIGURE_PLAN,
        })

    def _prefill(self, session: WizardSession, plan_type_name: str) -> PlanConfiguration:
        """Fill blank configuration fields from the original plan when replacing."""
        config = session.config
        original = session.original
        defaults = {"effective_date": config.effective_date or self.today()}
        if session.is_replacement and original is not None:
            defaults.update({
                "carrier": config.carrier or original.original_carrier,
                "billing_type": config.billing_type or original.original_billing,
                "commissions_paid_by": config.commissions_paid_by or original.original_commission_paid_by_carrier,
                "policy_group_number": config.policy_group_number or original.original_policy_group_number,
                "original_plan_effective_date": (
                    config.original_plan_effective_date or original.original_effective_date
                ),
                "prior_plan": config.prior_plan or original.original_plan_name,
            })
        carrier = defaults.get("carrier") or config.carrier
        previous_default = _default_plan_name(carrier, session.plan_type_name)
        if carrier and (not config.plan_name or config.plan_name == previous_default):
            defaults["plan_name"] = _default_plan_name(carrier, plan_type_name)
        return config.model_copy(update=defaults)

    def configure(
        self, session: WizardSession, updates: Optional[dict] = None, strict: bool = False
    ) -> WizardSession:
        """Apply configuration edits and move to review once required fields are present."""
        self._expect(session, WizardStep.CONFIGURE_PLAN)
        config = session.config
        if updates:
            config = config.merged(updates)

        missing = config.missing_fields(strict=strict)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        return session.model_copy(update={"config": config, "step": WizardStep.REVIEW})

    def review(self, session: WizardSession) -> WizardSession:
        self._expect(session, WizardStep.REVIEW)
        missing = session.config.missing_fields()
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        return session

    def back(self, session: WizardSession) -> WizardSession:
        if session.step == WizardStep.SAVED:
            raise ValidationError("Plan already saved; start the wizard again to add another")
        if session.step == WizardStep.SELECT_PLAN_TYPE:
            previous = WizardStep.SELECT_TARGET_PLAN if session.is_replacement else WizardStep.SELECT_PLAN_TYPE
        else:
            previous = PREVIOUS_STEP[session.step]
        return session.model_copy(update={"step": previous})

    def save(self, session: WizardSession) -> Tuple[WizardSession, PlanDto]:
        self.review(session)
        if session.saved_plan_id is not None:
            raise ValidationError(f"Plan already saved as plan {session.saved_plan_id}")
        if session.is_replacement:
            plan = create_replacement_plan(self.plans, self.replacement_config(session), today=self.today())
        else:
            plan = self._create_new_plan(session)
        return session.model_copy(update={"step": WizardStep.SAVED, "saved_plan_id": plan.plan_id}), plan

    def replacement_config(self, session: WizardSession) -> ReplacePlanConfig:
        return ReplacePlanConfig(
            original_plan_id=session.original.original_plan_id if session.original else None,
            account_id=session.account_id,
            account_name=session.account,
            replacement_plan_type_id=session.plan_type_id,
            replacement_plan_type_name=session.plan_type_name,
            non_brokered=session.options.non_brokered,
            include_splits=session.options.include_splits,
            include_contributions=session.options.include_contributions,
            include_eligibility_rules=session.options.include_eligibility_rules,
        )

    def _create_new_plan(self, session: WizardSession) -> PlanDto:
        if not session.account_id:
            raise ValidationError("Account ID is required")
        if not session.plan_type_name:
            raise ValidationError("Plan type is required")

        config = session.config
        renewal_date = config.renewal_date or (
            config.effective_date + timedelta(days=settings.REPLACEMENT_TERM_DAYS)
        )
        plan = self.plans.create(
            PlanCreate(
                account_id=session.account_id,
                carrier=config.carrier,
                plan_type=session.plan_type_name,
                plan_type_id=session.plan_type_id,
                billing=config.billing_type,
                policy_group_number=config.policy_group_number,
                commission_paid_by_carrier=config.commissions_paid_by,
                effective_date=config.effective_date,
                renewal_date=renewal_date,
                status=determine_status(config.effective_date, today=self.today()),
            )
        )
        logger.info("Plan %s added for account %s", plan.plan_id, session.account_id)
        return plan

    # ── Replacement helpers ────────────────────────────────────────

    def validate_replacement_plan(self, config: ReplacePlanConfig) -> dict:
        return validate_replacement_plan(self.plans, config)

    def create_replacement_plan(self, config: ReplacePlanConfig) -> PlanDto:
        return create_replacement_plan(self.plans, config, today=self.today())

    def cancel_plan_replacement(self, plan_id: int) -> PlanDto:
        return cancel_plan_replacement(self.plans, plan_id)
