"""Block ORM model: one placed interval of a planned day."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from dayforge.db.base import Base
from dayforge.db.types import JSONBCompat, UTCDateTime


class Block(Base):
    __tablename__ = "blocks"
    __table_args__ = (
        Index("ix_blocks_user_start", "user_id", "start_at"),
        CheckConstraint("end_at > start_at", name="ck_blocks_positive_duration"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    type = Column(String(length=20), nullable=False)
    status = Column(String(length=20), nullable=False, server_default=sa_text("'planned'"))
    start_at = Column(UTCDateTime, nullable=False)
    end_at = Column(UTCDateTime, nullable=False)
    work_item_id = Column(
        UUID(as_uuid=True),
        ForeignKey("work_items.id", ondelete="SET NULL"),
        nullable=True,
    )
    ritual_id = Column(
        UUID(as_uuid=True),
        ForeignKey("rituals.id", ondelete="SET NULL"),
        nullable=True,
    )
    description = Column(Text, nullable=True)
    meal_details = Column(Text, nullable=True)
    details = Column(JSONBCompat, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
