"""WorkItem ORM model: the unscheduled backlog."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from dayforge.db.base import Base


class WorkItem(Base):
    __tablename__ = "work_items"
    __table_args__ = (
        Index("ix_work_items_user_id", "user_id"),
        Index("ix_work_items_status", "status"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    est_min = Column(Integer, nullable=True)
    min_block_min = Column(Integer, nullable=True)
    category = Column(String(length=20), nullable=False, server_default=sa_text("'business'"))
    priority = Column(Integer, nullable=False, server_default=sa_text("0"))
    status = Column(String(length=20), nullable=False, server_default=sa_text("'open'"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
