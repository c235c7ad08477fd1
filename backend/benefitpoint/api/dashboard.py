"""Dashboard API: portfolio-wide renewal and new-business counters."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from benefitpoint.core.database import get_db
from benefitpoint.repositories.accounts_repo import AccountsRepo
from benefitpoint.schemas.dashboard import DashboardSummary

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(db: Session = Depends(get_db)):
    return AccountsRepo(db).generate_dashboard_summary()
