"""Daily history ORM model: one row per completed day."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    text as sa_text,
)
from sqlalchemy.dialects.postgresql import UUID

from dayforge.db.base import Base


class DailyHistory(Base):
    __tablename__ = "daily_history"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_history_user_date"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    workout_type = Column(String(length=50), nullable=True)
    workout_completed = Column(Boolean, nullable=False, server_default=sa_text("false"))
    lunch_meal = Column(Text, nullable=True)
    dinner_meal = Column(Text, nullable=True)
    sleep_hours = Column(Float, nullable=True)
    tasks_completed = Column(Integer, nullable=True)
    total_work_minutes = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
