"""Account model: a brokerage client organization."""
from sqlalchemy import Column, Integer, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from benefitpoint.core.database import Base


class Account(Base):
    __tablename__ = "accounts"

    account_id = Column(Integer, primary_key=True, index=True)

    # Core info
    account = Column(String, nullable=False, index=True)  # account name
    state = Column(String, nullable=True, index=True)  # doubles as office division
    sba = Column(Integer, nullable=True, index=True)

    # Commission terms
    commission_1_basis = Column(String, nullable=True)
    commission_2_basis = Column(String, nullable=True)
    flat_fee = Column(Numeric(10, 2), nullable=True)
    percentage = Column(Numeric(6, 3), nullable=True)

    created_date = Column(DateTime(timezone=True), server_default=func.now())
    updated_date = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    plans = relationship("Plan", back_populates="account")
