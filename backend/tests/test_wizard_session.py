from datetime import date

import pytest

from benefitpoint.core.exceptions import ValidationError
from benefitpoint.wizard.session import (
    OriginalPlanSnapshot,
    PlanConfiguration,
    ReplacementOptions,
    WizardSession,
    WizardStep,
)


def _replacement_session():
    return WizardSession(
        step=WizardStep.CONFIGURE_PLAN,
        is_replacement=True,
        account="The Daily Grind",
        account_id=7,
        plan_type_id=3,
        plan_type_name="Dental PPO",
        original=OriginalPlanSnapshot(
            original_plan_id=11,
            original_carrier="Blue Shield of California",
            original_plan_type="Medical PPO",
            original_status="active",
            original_effective_date=date(2024, 1, 1),
            original_renewal_date=date(2025, 1, 1),
        ),
        options=ReplacementOptions(non_brokered=True, include_splits="No"),
        config=PlanConfiguration(carrier="Aetna", effective_date=date(2025, 1, 1), continuous_policy=True),
    )


def test_query_params_use_the_wizard_keys():
    params = _replacement_session().to_query_params()

    assert params["step"] == "configure_plan"
    assert params["isReplacement"] == "true"
    assert params["replaceId"] == "11"
    assert params["replaceType"] == "Dental PPO"
    assert params["replaceTypeId"] == "3"
    assert params["originalPlanId"] == "11"
    assert params["originalEffectiveDate"] == "2024-01-01"
    assert params["nonBrokered"] == "true"
    assert params["includeSplits"] == "No"
    assert params["effectiveDate"] == "2025-01-01"
    assert params["continuousPolicy"] == "true"
    assert params["fundingType"] == "Fully Insured"
    assert "newType" not in params
    assert all(isinstance(value, str) for value in params.values())


def test_query_params_rebuild_the_same_session():
    session = _replacement_session()

    rebuilt = WizardSession.from_query_params(session.to_query_params())

    assert rebuilt.model_dump() == session.model_dump()


def test_new_plan_session_uses_new_type_keys():
    session = WizardSession(account="Acme", plan_type_name="Vision", plan_type_id=6)

    params = session.to_query_params()

    assert params["newType"] == "Vision"
    assert params["newTypeId"] == "6"
    assert "originalPlanId" not in params
    assert "includeSplits" not in params


def test_replace_id_alone_starts_at_target_selection():
    session = WizardSession.from_query_params({"replaceId": "42", "accountId": "7"})

    assert session.is_replacement is True
    assert session.step == WizardStep.SELECT_TARGET_PLAN
    assert session.original.original_plan_id == 42
    assert session.account_id == 7


def test_blank_values_are_treated_as_unset():
    session = WizardSession.from_query_params({"step": "configure_plan", "carrier": "", "effectiveDate": ""})

    assert session.config.carrier is None
    assert session.config.effective_date is None


@pytest.mark.parametrize(
    "params, fragment",
    [
        ({"step": "warp_speed"}, "Unknown wizard step"),
        ({"accountId": "seven"}, "accountId must be an integer"),
        ({"effectiveDate": "01/02/2025"}, "effectiveDate"),
        ({"replaceId": "1", "includeSplits": "Maybe"}, "includeSplits"),
        ({"isReplacement": "sometimes"}, "expected true or false"),
    ],
)
def test_malformed_params_raise_validation_error(params, fragment):
    with pytest.raises(ValidationError) as exc:
        WizardSession.from_query_params(params)

    assert fragment in exc.value.message


def test_missing_fields_basic_and_strict():
    config = PlanConfiguration(carrier="Aetna", billing_type="  ")

    assert config.missing_fields() == ["billingType", "planName", "effectiveDate"]
    assert config.missing_fields(strict=True) == [
        "billingType",
        "planName",
        "effectiveDate",
        "originalPlanEffectiveDate",
        "renewalDate",
        "commissionStartDate",
        "commissionsPaidBy",
        "policyGroupNumber",
        "priorPlan",
    ]


def test_merged_accepts_wire_names_and_clears_blanks():
    config = PlanConfiguration(carrier="Aetna", plan_name="Aetna Dental")

    merged = config.merged({"billingType": "List Bill", "plan_name": "", "fundingType": ""})

    assert merged.billing_type == "List Bill"
    assert merged.plan_name is None
    assert merged.funding_type == "Fully Insured"
    assert merged.carrier == "Aetna"
