"""Contact form message model."""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func

from app.core.database import Base


class MessageStatus(str, enum.Enum):
    """Read state of a contact message."""
    UNREAD = "unread"
    READ = "read"


class ContactMessage(Base):
    """Message sent through the contact page."""
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(Enum(MessageStatus, values_callable=lambda e: [m.value for m in e]), nullable=False, default=MessageStatus.UNREAD)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
