"""SQLAlchemy model for persisted direct messages."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from campusshare.infrastructure.database import Base
from campusshare.utils import now_utc_naive_datetime


class MessageModel(Base):
    """Database representation of a message exchanged between two users."""

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_thread", "sender_id", "recipient_id", "context_type", "context_id", "created_at"),
        Index("ix_message_unread_email", "read", "email_notification_sent", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    recipient_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    context_type = Column(String(20), nullable=False)
    context_id = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    email_notification_sent = Column(Boolean, nullable=False, default=False)
    email_notification_sent_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_utc_naive_datetime)

    sender = relationship("UserModel", foreign_keys=[sender_id], lazy="joined")
    recipient = relationship("UserModel", foreign_keys=[recipient_id], lazy="joined")


__all__ = ["MessageModel"]
