"""
HIRADC (Hazard Identification, Risk Assessment and Determining Control) model.
"""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey, Enum
from sqlalchemy.sql import func

from app.core.database import Base


class RiskCategory(str, enum.Enum):
    """Risk buckets derived from the 1-25 risk score."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    EXTREME = "Extreme"


class HiradcAnalysis(Base):
    """Hazard analysis with a derived risk score and category."""
    __tablename__ = "hiradc_analyses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    activity_name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    hazard = Column(Text, nullable=False)

    severity = Column(Integer, nullable=False)  # 1-5
    likelihood = Column(Integer, nullable=False)  # 1-5
    risk_score = Column(Integer, nullable=False, index=True)  # severity x likelihood
    risk_category = Column(Enum(RiskCategory, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True)

    recommended_controls = Column(JSON, nullable=True)
    ai_insight = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
