"""
Activity log model for audit trail.
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.database import Base


class ActivityLog(Base):
    """Activity log model for tracking user actions."""
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    # Actor (null for anonymous actions such as a password reset request)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    action = Column(String(100), nullable=False, index=True)  # e.g. "analysis_create", "login"
    resource_type = Column(String(50), nullable=True, index=True)  # e.g. "hiradc", "eta", "user"
    resource_id = Column(Integer, nullable=True, index=True)

    details = Column(JSON, nullable=True)

    ip_address = Column(String(45), nullable=True)  # IPv4 or IPv6
    user_agent = Column(String(255), nullable=True)

    user = relationship("User", foreign_keys=[user_id])
