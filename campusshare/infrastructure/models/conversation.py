"""SQLAlchemy model for conversation threads."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from campusshare.infrastructure.database import Base
from campusshare.utils import now_utc_naive_datetime


class ConversationModel(Base):
    """One row per unordered participant pair and subject context."""

    __tablename__ = "conversation"
    __table_args__ = (
        UniqueConstraint(
            "participant_low_id",
            "participant_high_id",
            "context_type",
            "context_id",
            name="uq_conversation_pair_context",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    # participant_low_id < participant_high_id always holds
    participant_low_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    participant_high_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    context_type = Column(String(20), nullable=False)
    context_id = Column(Integer, nullable=False)
    last_message_id = Column(Integer, ForeignKey("message.id"), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_utc_naive_datetime)
    updated_at = Column(DateTime(), nullable=False, default=now_utc_naive_datetime)


__all__ = ["ConversationModel"]
