"""Fault Tree Analysis model."""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func

from app.core.database import Base


class GateType(str, enum.Enum):
    """Logic gate types shared by fault trees and cause-consequence diagrams."""
    AND = "AND"
    OR = "OR"


class FtaAnalysis(Base):
    """Fault tree: top event plus gates, intermediate and basic events with layout."""
    __tablename__ = "fta_analyses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    top_event = Column(Text, nullable=False)
    structure = Column(JSON, nullable=False)  # Layout coordinates persisted as-is

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
