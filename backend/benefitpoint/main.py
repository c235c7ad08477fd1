import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from benefitpoint.core.config import Settings, settings as default_settings
from benefitpoint.core.database import Base, create_db_engine, create_session_factory
from benefitpoint.core.exceptions import BenefitPointError
from benefitpoint.models import Carrier, PlanType
from benefitpoint.api import accounts, auth, carriers, dashboard, plan_types, plans, wizard

logger = logging.getLogger(__name__)

PLAN_TYPES = [
    ("Medical PPO", "Medical"),
    ("Medical HMO", "Medical"),
    ("Medical HDHP", "Medical"),
    ("Dental PPO", "Dental"),
    ("Dental HMO", "Dental"),
    ("Vision", "Vision"),
    ("Basic Life/AD&D", "Life"),
    ("Voluntary Life", "Life"),
    ("Short Term Disability", "Disability"),
    ("Long Term Disability", "Disability"),
    ("401(k) Retirement", "Retirement"),
    ("Commission Split", "Commission"),
]

CARRIERS = [
    "Aetna",
    "Anthem Blue Cross",
    "Blue Shield of California",
    "Cigna",
    "Delta Dental",
    "Guardian",
    "Kaiser Permanente",
    "MetLife",
    "Principal Financial",
    "UnitedHealthcare",
    "VSP",
]


def seed_reference_data(db: Session) -> None:
    """Insert any missing plan types and carriers. Safe to run repeatedly."""
    for name, category in PLAN_TYPES:
        if not db.query(PlanType).filter(PlanType.plan_type_name == name).first():
            db.add(PlanType(plan_type_name=name, category=category, is_active=True))
            logger.info("Created plan type %s", name)

    for company_name in CARRIERS:
        if not db.query(Carrier).filter(Carrier.company_name == company_name).first():
            db.add(Carrier(company_name=company_name, is_active=True))
            logger.info("Created carrier %s", company_name)

    db.commit()


def init_database(engine: Engine, session_factory, seed: bool = True):
    """Create tables and seed reference data on startup."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    if not seed:
        return

    db = session_factory()
    try:
        seed_reference_data(db)
        logger.info("Reference data seeded")
    except Exception as e:
        logger.error("Error seeding data: %s", e)
        db.rollback()
    finally:
        db.close()


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the store connection (unless one was injected) and initialise the schema."""
        owns_engine = app.state.engine is None
        if owns_engine:
            app.state.engine = create_db_engine(settings.DATABASE_URL)
            app.state.session_factory = create_session_factory(app.state.engine)
        init_database(app.state.engine, app.state.session_factory, seed=settings.SEED_REFERENCE_DATA)
        yield
        if owns_engine:
            app.state.engine.dispose()

    # Disable API docs in production
    docs_url = "/docs" if settings.ENVIRONMENT != "production" else None
    redoc_url = "/redoc" if settings.ENVIRONMENT != "production" else None

    app = FastAPI(
        title=settings.APP_NAME,
        description="BenefitPoint - Accounts & Benefit Plans API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=docs_url,
        redoc_url=redoc_url,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine) if engine is not None else None

    # Every error leaves as JSON with a single "detail" message
    @app.exception_handler(BenefitPointError)
    async def benefitpoint_exception_handler(request, exc: BenefitPointError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error("Unhandled exception: %s\n%s", exc, traceback.format_exc())
        return JSONResponse(status_code=500, content={"detail": f"Internal error: {str(exc)}"})

    # CORS: local dev plus the deployed frontend
    allowed_origins = ["http://localhost:3000", "http://frontend:3000"]
    frontend_url = settings.FRONTEND_URL
    if frontend_url and frontend_url not in allowed_origins:
        allowed_origins.append(frontend_url)
        if not frontend_url.startswith("https"):
            allowed_origins.append(frontend_url.replace("http://", "https://"))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": "benefitpoint-api", "version": "1.0.0"}

    @app.get("/")
    def root():
        return {"message": "BenefitPoint API", "version": "1.0.0", "docs": docs_url}

    app.include_router(auth.router)
    app.include_router(accounts.router)
    app.include_router(plans.router)
    app.include_router(carriers.router)
    app.include_router(plan_types.router)
    app.include_router(dashboard.router)
    app.include_router(wizard.router)

    return app


app = create_app()
