"""Event Tree Analysis model."""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func

from app.core.database import Base


class OutcomeSeverity(str, enum.Enum):
    """Severity bucket of an event tree outcome path."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class EtaAnalysis(Base):
    """Event tree: initiating event, ordered barriers and the enumerated outcomes."""
    __tablename__ = "eta_analyses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    initiating_event = Column(Text, nullable=False)
    barriers = Column(JSON, nullable=False)  # [{id, name, success_rate}]
    outcomes = Column(JSON, nullable=False)  # [{path, frequency, severity}], recomputed on save

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
