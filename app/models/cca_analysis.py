"""Cause Consequence Analysis model."""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func

from app.core.database import Base


class CcaAnalysis(Base):
    """Cause-consequence diagram around a critical event; layout follows list order."""
    __tablename__ = "cca_analyses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    critical_event = Column(Text, nullable=False)
    cause_tree = Column(JSON, nullable=False)  # [{id, text, gate_type}]
    consequence_tree = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
