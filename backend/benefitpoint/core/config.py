from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # App
    APP_NAME: str = "BenefitPoint Portal"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "postgresql://benefitpoint_user:benefitpoint_pass@db:5432/benefitpoint_db"

    # App URL (frontend)
    FRONTEND_URL: Optional[str] = None

    # Listing defaults
    DEFAULT_PAGE_SIZE: int = 50

    # Dashboard windows (days)
    RENEWAL_WINDOW_DAYS: int = 30
    NEW_BUSINESS_WINDOW_DAYS: int = 90

    # Replacement plans renew this many days after their effective date
    REPLACEMENT_TERM_DAYS: int = 365

    # Seed plan types and carriers on startup
    SEED_REFERENCE_DATA: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
