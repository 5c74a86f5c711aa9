"""Value types flowing through the planning engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, Literal, Optional, Tuple
from uuid import UUID

BlockType = Literal["task", "ritual", "event", "meal", "sleep", "buffer", "commute"]
WorkCategory = Literal["business", "personal"]

DEFAULT_ESTIMATE_MINUTES = 30
MIN_BLOCK_MINUTES = 5


@dataclass(frozen=True)
class WorkItemSnapshot:
    id: UUID
    title: str
    category: WorkCategory
    priority: int = 0
    description: Optional[str] = None
    est_min: Optional[int] = None
    min_block_min: Optional[int] = None

    @property
    def duration_minutes(self) -> int:
        minutes = self.est_min or self.min_block_min or DEFAULT_ESTIMATE_MINUTES
        return max(minutes, MIN_BLOCK_MINUTES)


@dataclass(frozen=True)
class FixedEventSnapshot:
    id: UUID
    title: str
    start_at: datetime
    end_at: datetime
    hard_fixed: bool = True


@dataclass(frozen=True)
class RitualSnapshot:
    id: UUID
    name: str
    duration_min: int
    preferred_start: Optional[time] = None
    preferred_end: Optional[time] = None
    hard_fixed: bool = False
    days_of_week: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HistorySnapshot:
    day: date
    workout_type: Optional[str] = None
    workout_completed: bool = False
    lunch_meal: Optional[str] = None
    dinner_meal: Optional[str] = None


@dataclass(frozen=True)
class PlannedBlock:
    """A placed interval; minutes are relative to local midnight of the plan date."""

    title: str
    type: BlockType
    start_minute: int
    end_minute: int
    start_at: datetime
    end_at: datetime
    status: str = "planned"
    work_item_id: Optional[UUID] = None
    ritual_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    description: Optional[str] = None
    meal_details: Optional[str] = None
    details: Optional[Dict[str, Any]] = field(default=None, hash=False, compare=True)

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute
