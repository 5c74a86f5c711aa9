"""FixedEvent ORM model for externally sourced calendar entries."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from dayforge.db.base import Base
from dayforge.db.types import UTCDateTime


class FixedEvent(Base):
    __tablename__ = "fixed_events"
    __table_args__ = (Index("ix_fixed_events_user_start", "user_id", "start_at"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    start_at = Column(UTCDateTime, nullable=False)
    end_at = Column(UTCDateTime, nullable=False)
    hard_fixed = Column(Boolean, nullable=False, server_default=sa_text("true"))
    source = Column(String(length=50), nullable=False, server_default=sa_text("'manual'"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
