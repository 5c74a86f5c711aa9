"""Ritual rule ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Text, Time, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from dayforge.db.base import Base
from dayforge.db.types import JSONBCompat


class Ritual(Base):
    __tablename__ = "rituals"
    __table_args__ = (Index("ix_rituals_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    duration_min = Column(Integer, nullable=False)
    # Local wall-clock times in the planner's civil timezone.
    preferred_start = Column(Time, nullable=True)
    preferred_end = Column(Time, nullable=True)
    hard_fixed = Column(Boolean, nullable=False, server_default=sa_text("false"))
    days_of_week = Column(JSONBCompat, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
