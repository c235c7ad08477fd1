"""Plan wizard API.

Each endpoint rebuilds the WizardSession from the request's query
parameters, runs one transition and returns the parameters for the next
step. The client passes them back unchanged on the following call.
"""
import logging
from typing import Dict, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from benefitpoint.core.database import get_db
from benefitpoint.schemas.base import CamelModel
from benefitpoint.schemas.plan import PlanDto
from benefitpoint.wizard.flow import PlanWizard, ReplacePlanConfig
from benefitpoint.wizard.session import PlanConfiguration, WizardSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/wizard", tags=["wizard"])


class WizardResponse(CamelModel):
    step: str
    params: Dict[str, str]
    plan: Optional[PlanDto] = None
    configuration: Optional[PlanConfiguration] = None


def _respond(session: WizardSession, plan: Optional[PlanDto] = None, with_config: bool = False) -> WizardResponse:
    return WizardResponse(
        step=session.step.value,
        params=session.to_query_params(),
        plan=plan,
        configuration=session.config if with_config else None,
    )


def current_session(request: Request) -> WizardSession:
    return WizardSession.from_query_params(request.query_params)


@router.get("/add-plan", response_model=WizardResponse)
def add_plan(
    account: Optional[str] = None,
    account_id: Optional[int] = Query(None, alias="accountId"),
    db: Session = Depends(get_db),
):
    return _respond(PlanWizard(db).start_new_plan(account=account, account_id=account_id))


@router.get("/replace-plan", response_model=WizardResponse)
def replace_plan(
    replace_id: int = Query(..., alias="replaceId"),
    account_id: Optional[int] = Query(None, alias="accountId"),
    db: Session = Depends(get_db),
):
    return _respond(PlanWizard(db).start_replacement(replace_id, account_id=account_id))


@router.post("/select-target", response_model=WizardResponse)
def select_target(session: WizardSession = Depends(current_session), db: Session = Depends(get_db)):
    return _respond(PlanWizard(db).select_target_plan(session))


@router.post("/plan-type", response_model=WizardResponse)
def select_plan_type(session: WizardSession = Depends(current_session), db: Session = Depends(get_db)):
    wizard = PlanWizard(db)
    return _respond(wizard.select_plan_type(session, session.plan_type_name, session.plan_type_id))


@router.post("/configure", response_model=WizardResponse)
def configure(
    strict: bool = False,
    session: WizardSession = Depends(current_session),
    db: Session = Depends(get_db),
):
    return _respond(PlanWizard(db).configure(session, strict=strict), with_config=True)


@router.get("/review", response_model=WizardResponse)
def review(session: WizardSession = Depends(current_session), db: Session = Depends(get_db)):
    return _respond(PlanWizard(db).review(session), with_config=True)


@router.post("/back", response_model=WizardResponse)
def back(session: WizardSession = Depends(current_session), db: Session = Depends(get_db)):
    return _respond(PlanWizard(db).back(session))


@router.post("/save", response_model=WizardResponse, status_code=201)
def save(session: WizardSession = Depends(current_session), db: Session = Depends(get_db)):
    saved, plan = PlanWizard(db).save(session)
    logger.info("Wizard saved plan %s (replacement=%s)", plan.plan_id, saved.is_replacement)
    return _respond(saved, plan=plan)


@router.post("/validate-replacement")
def validate_replacement(config: ReplacePlanConfig, db: Session = Depends(get_db)):
    return PlanWizard(db).validate_replacement_plan(config)


@router.post("/create-replacement", response_model=PlanDto, status_code=201)
def create_replacement(config: ReplacePlanConfig, db: Session = Depends(get_db)):
    return PlanWizard(db).create_replacement_plan(config)
