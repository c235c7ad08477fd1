"""Wizard state carried between steps.

A WizardSession is the only state the add/replace plan wizard has. Between
requests it travels as flat string query parameters; to_query_params and
from_query_params are the only place that format is read or written.
"""
import enum
import logging
from datetime import date, datetime
from typing import ClassVar, Dict, List, Literal, Mapping, Optional, Tuple, Type
from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from benefitpoint.core.exceptions import ValidationError
from benefitpoint.schemas.base import CamelModel

logger = logging.getLogger(__name__)

YesNo = Literal["Yes", "No"]


class WizardStep(str, enum.Enum):
    SELECT_TARGET_PLAN = "select_target_plan"
    SELECT_PLAN_TYPE = "select_plan_type"
    CONFIGURE_PLAN = "configure_plan"
    REVIEW = "review"
    SAVED = "saved"


class OriginalPlanSnapshot(CamelModel):
    """The plan being replaced, as it looked when the wizard started."""
    original_plan_id: int
    original_plan_name: Optional[str] = None
    original_carrier: Optional[str] = None
    original_plan_type: Optional[str] = None
    original_status: Optional[str] = None
    original_effective_date: Optional[date] = None
    original_renewal_date: Optional[date] = None
    original_cancellation_date: Optional[date] = None
    original_commission_paid_by_carrier: Optional[str] = None
    original_policy_group_number: Optional[str] = None
    original_billing: Optional[str] = None
    original_account_name: Optional[str] = None
    original_account_office_division: Optional[str] = None
    original_created_date: Optional[datetime] = None
    original_updated_date: Optional[datetime] = None


class ReplacementOptions(CamelModel):
    non_brokered: bool = False
    include_splits: YesNo = "Yes"
    include_contributions: YesNo = "No"
    include_eligibility_rules: YesNo = "No"

    def merged(self, updates: Mapping[str, object]) -> "ReplacementOptions":
        return _merge(self, updates)


class PlanConfiguration(CamelModel):
    carrier: Optional[str] = None
    billing_type: Optional[str] = None
    plan_name: Optional[str] = None
    commissions_paid_by: Optional[str] = None
    funding_type: str = "Fully Insured"
    policy_group_number: Optional[str] = None
    original_plan_effective_date: Optional[date] = None
    effective_date: Optional[date] = None
    renewal_date: Optional[date] = None
    commission_start_date: Optional[date] = None
    new_business_until: Optional[date] = None
    continuous_policy: bool = False
    origination_reason: Optional[str] = None
    prior_plan: Optional[str] = None
    automatic_activity_log: Optional[str] = None
    attribute_view: str = "Express"
    eligible_employees: Optional[int] = Field(default=None, ge=0)
    metal_level: Optional[str] = None
    aca_safe_harbor: Optional[str] = None
    reporting_year: Optional[int] = None
    secondary_plan_type: str = "None Selected"
    benefit_attributes: Literal["empty", "standard", "copy"] = "empty"
    current_plan: Optional[str] = None

    REQUIRED: ClassVar[Tuple[str, ...]] = ("carrier", "billing_type", "plan_name", "effective_date")
    STRICT_REQUIRED: ClassVar[Tuple[str, ...]] = (
        "original_plan_effective_date",
        "renewal_date",
        "commission_start_date",
        "commissions_paid_by",
        "policy_group_number",
        "prior_plan",
    )

    def missing_fields(self, strict: bool = False) -> List[str]:
        """Wire names of required fields that are unset or blank."""
        required = self.REQUIRED + (self.STRICT_REQUIRED if strict else ())
        missing = []
        for name in required:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(type(self).model_fields[name].alias or name)
        return missing

    def merged(self, updates: Mapping[str, object]) -> "PlanConfiguration":
        """A copy with updates applied. Keys may be wire or field names; blanks clear a field."""
        return _merge(self, updates)


def _stringify(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(model: BaseModel) -> Dict[str, str]:
    dumped = model.model_dump(by_alias=True, exclude_none=True, mode="json")
    return {key: _stringify(value) for key, value in dumped.items()}


def _pick(model_cls: Type[BaseModel], params: Mapping[str, str]) -> Dict[str, str]:
    """The non-blank params that belong to model_cls, keyed by wire name."""
    picked = {}
    for name, field in model_cls.model_fields.items():
        key = field.alias or name
        value = params.get(key)
        if value is not None and str(value).strip() != "":
            picked[key] = value
    return picked


def _describe(error: SchemaError) -> str:
    problems = []
    for item in error.errors():
        where = ".".join(str(part) for part in item["loc"])
        problems.append(f"{where}: {item['msg']}")
    return "Invalid wizard parameters: " + "; ".join(problems)


def _merge(model: BaseModel, updates: Mapping[str, object]):
    model_cls = type(model)
    names = {(field.alias or name): name for name, field in model_cls.model_fields.items()}
    values = model.model_dump()
    for key, value in updates.items():
        name = names.get(key, key)
        if name not in model_cls.model_fields:
            continue
        if isinstance(value, str) and not value.strip():
            value = None
        if value is None and model_cls.model_fields[name].default is not None:
            continue
        values[name] = value
    try:
        return model_cls.model_validate(values)
    except SchemaError as e:
        message = _describe(e)
        logger.warning(message)
        raise ValidationError(message)


def _parse_flag(value: Optional[str]) -> bool:
    if value is None or value == "":
        return False
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValidationError(f"Invalid wizard parameters: expected true or false, got {value!r}")


def _parse_int(key: str, value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid wizard parameters: {key} must be an integer, got {value!r}")


class WizardSession(BaseModel):
    step: WizardStep = WizardStep.SELECT_PLAN_TYPE
    is_replacement: bool = False
    account: Optional[str] = None
    account_id: Optional[int] = None
    plan_type_id: Optional[int] = None
    plan_type_name: Optional[str] = None
    original: Optional[OriginalPlanSnapshot] = None
    options: ReplacementOptions = Field(default_factory=ReplacementOptions)
    config: PlanConfiguration = Field(default_factory=PlanConfiguration)
    saved_plan_id: Optional[int] = None

    def to_query_params(self) -> Dict[str, str]:
        params = {
            "step": self.step.value,
            "isReplacement": _stringify(self.is_replacement),
        }
        if self.account:
            params["account"] = self.account
        if self.account_id is not None:
            params["accountId"] = str(self.account_id)

        type_key = "replaceType" if self.is_replacement else "newType"
        if self.plan_type_name:
            params[type_key] = self.plan_type_name
        if self.plan_type_id is not None:
            params[f"{type_key}Id"] = str(self.plan_type_id)

        if self.is_replacement:
            if self.original is not None:
                params["replaceId"] = str(self.original.original_plan_id)
                params.update(_flatten(self.original))
            params.update(_flatten(self.options))

        params.update(_flatten(self.config))
        if self.saved_plan_id is not None:
            params["savedPlanId"] = str(self.saved_plan_id)
        return params

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> "WizardSession":
        """Rebuild a session from query parameters; malformed values raise ValidationError."""
        replace_id = _parse_int("replaceId", params.get("replaceId"))
        is_replacement = _parse_flag(params.get("isReplacement")) or replace_id is not None

        raw_step = params.get("step")
        if raw_step:
            try:
                step = WizardStep(raw_step)
            except ValueError:
                raise ValidationError(f"Unknown wizard step: {raw_step}")
        else:
            step = WizardStep.SELECT_TARGET_PLAN if is_replacement else WizardStep.SELECT_PLAN_TYPE

        type_key = "replaceType" if is_replacement else "newType"
        original_fields = _pick(OriginalPlanSnapshot, params)
        if "originalPlanId" not in original_fields and replace_id is not None:
            original_fields["originalPlanId"] = replace_id

        try:
            original = (
                OriginalPlanSnapshot.model_validate(original_fields)
                if is_replacement and "originalPlanId" in original_fields
                else None
            )
            options = ReplacementOptions.model_validate(_pick(ReplacementOptions, params))
            config = PlanConfiguration.model_validate(_pick(PlanConfiguration, params))
        except SchemaError as e:
            message = _describe(e)
            logger.warning(message)
            raise ValidationError(message)

        return cls(
            step=step,
            is_replacement=is_replacement,
            account=params.get("account") or None,
            account_id=_parse_int("accountId", params.get("accountId")),
            plan_type_id=_parse_int(f"{type_key}Id", params.get(f"{type_key}Id")),
            plan_type_name=params.get(type_key) or None,
            original=original,
            options=options,
            config=config,
            saved_plan_id=_parse_int("savedPlanId", params.get("savedPlanId")),
        )
