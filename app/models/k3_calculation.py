"""Occupational safety (K3) metrics calculation model."""
from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey
from sqlalchemy.sql import func

from app.core.database import Base


class K3Calculation(Base):
    """Six input counts/hours and the six rate metrics derived from them."""
    __tablename__ = "k3_calculations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Inputs
    total_lti = Column(Float, nullable=False, default=0)
    total_incidents = Column(Float, nullable=False, default=0)
    total_work_hours = Column(Float, nullable=False, default=0)
    total_days_lost = Column(Float, nullable=False, default=0)
    employees_with_ppe = Column(Float, nullable=False, default=0)
    total_employees = Column(Float, nullable=False, default=0)

    # Derived metrics
    ltir = Column(Float, nullable=False)
    trir = Column(Float, nullable=False)
    severity_rate = Column(Float, nullable=False)
    frequency_rate = Column(Float, nullable=False)
    safe_man_hours = Column(Float, nullable=False)
    compliance_ppe = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
