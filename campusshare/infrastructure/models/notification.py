"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from campusshare.infrastructure.database import Base
from campusshare.utils import now_utc_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (Index("ix_notification_inbox", "user_id", "read", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    title = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    related_id = Column(Integer, nullable=True)
    related_type = Column(String(20), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_utc_naive_datetime)


__all__ = ["NotificationModel"]
