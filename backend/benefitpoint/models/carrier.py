"""Carrier model: insurance companies underwriting plans."""
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.sql import func
from benefitpoint.core.database import Base


class Carrier(Base):
    __tablename__ = "carriers"

    carrier_id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String, nullable=False, index=True)  # unique in practice, not enforced
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)
