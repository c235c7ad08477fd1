from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from benefitpoint.core.database import Base
import enum


class PlanStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    PENDING_CONFIGURATION = "pending_configuration"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class PlanType(Base):
    """Reference data for plan type selection menus."""
    __tablename__ = "plan_types"

    plan_type_id = Column(Integer, primary_key=True, index=True)
    plan_type_name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)


class Plan(Base):
    __tablename__ = "plans"

    plan_id = Column(Integer, primary_key=True, index=True)

    # Owning account (immutable after creation)
    account_id = Column(Integer, ForeignKey("accounts.account_id"), nullable=False, index=True)

    # Plan information
    carrier = Column(String, nullable=False, index=True)
    plan_type = Column(String, nullable=False, index=True)  # free text, e.g. "Medical PPO"
    plan_type_id = Column(Integer, ForeignKey("plan_types.plan_type_id"), nullable=True)
    commission_paid_by_carrier = Column(String, nullable=True)  # "Yes", "No", "N/A"
    billing = Column(String, nullable=True)
    policy_group_number = Column(String, nullable=True, index=True)

    # Dates
    effective_date = Column(Date, nullable=False)
    renewal_date = Column(Date, nullable=False)
    cancellation_date = Column(Date, nullable=True)

    # Status: active, pending, pending_configuration, cancelled, ...
    status = Column(String, default=PlanStatus.ACTIVE.value, nullable=False, index=True)

    created_date = Column(DateTime(timezone=True), server_default=func.now())
    updated_date = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    account = relationship("Account", back_populates="plans")


class PlanConfig(Base):
    """Plan configuration captured by the wizard. Not written by the save step."""
    __tablename__ = "plan_configs"

    id = Column(Integer, primary_key=True, index=True)
    carrier = Column(String, nullable=False)
    billing_type = Column(String, nullable=False)
    plan_name = Column(String, nullable=False)
    policy_number = Column(String, nullable=True)
    original_effective_date = Column(Date, nullable=True)
    effective_date = Column(Date, nullable=False)
    commission_start_date = Column(Date, nullable=True)
    funding = Column(String, nullable=False)
    plan_id = Column(Integer, ForeignKey("plans.plan_id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)
