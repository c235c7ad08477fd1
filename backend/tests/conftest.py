"""
Test fixtures

An in-memory SQLite store shared by direct service/repository tests and by
the FastAPI TestClient, plus small factories for the core tables.
"""
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from benefitpoint.core.config import Settings
from benefitpoint.core.database import Base, create_db_engine, create_session_factory
from benefitpoint.main import create_app
from benefitpoint.models import Account, Carrier, Plan, PlanType

@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    settings = Settings(ENVIRONMENT="test", LOG_LEVEL="WARNING", SEED_REFERENCE_DATA=False)
    app = create_app(settings=settings, engine=engine)
    with TestClient(app) as client:
        yield client


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_account(db):
    def _make(**overrides):
        values = {
            "account": "The Daily Grind",
            "state": "CA",
            "sba": 1,
            "commission_1_basis": "PEPM",
            "flat_fee": Decimal("25.00"),
            "percentage": Decimal("4.500"),
            "created_date": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        values.update(overrides)
        account = Account(**values)
        db.add(account)
        db.commit()
        db.refresh(account)
        return account

    return _make


@pytest.fixture
def make_plan(db, make_account):
    def _make(account=None, **overrides):
        if account is None and "account_id" not in overrides:
            account = make_account()
        values = {
            "carrier": "Blue Shield of California",
            "plan_type": "Medical PPO",
            "commission_paid_by_carrier": "Yes",
            "billing": "List Bill",
            "policy_group_number": "W0051234",
            "effective_date": date(2024, 1, 1),
            "renewal_date": date(2025, 1, 1),
            "status": "active",
            "created_date": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        if account is not None:
            values["account_id"] = account.account_id
        values.update(overrides)
        plan = Plan(**values)
        db.add(plan)
        db.commit()
        db.refresh(plan)
        return plan

    return _make


@pytest.fixture
def make_plan_type(db):
    def _make(name="Medical PPO", category="Medical", is_active=True):
        plan_type = PlanType(plan_type_name=name, category=category, is_active=is_active)
        db.add(plan_type)
        db.commit()
        db.refresh(plan_type)
        return plan_type

    return _make


@pytest.fixture
def make_carrier(db):
    def _make(company_name="Aetna", is_active=True):
        carrier = Carrier(company_name=company_name, is_active=is_active)
        db.add(carrier)
        db.commit()
        db.refresh(carrier)
        return carrier

    return _make
