"""Conflict checks, first-fit slot search and the accumulating schedule."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from dayforge.planning.clock import ClockModel, format_minute
from dayforge.planning.types import MIN_BLOCK_MINUTES, BlockType, PlannedBlock

logger = logging.getLogger(__name__)

DEFAULT_STEP_MINUTES = 5


def conflicts(placed: Iterable[PlannedBlock], start: int, end: int) -> bool:
    """True when [start, end) overlaps any placed block."""
    return any(start < block.end_minute and end > block.start_minute for block in placed)


def find_slot(
    placed: Iterable[PlannedBlock],
    duration: int,
    window_start: int,
    window_end: int,
    step: int = DEFAULT_STEP_MINUTES,
) -> Optional[Tuple[int, int]]:
    """Return the earliest conflict-free (start, end) of ``duration`` inside the window."""
    if duration <= 0 or step <= 0:
        raise ValueError("duration and step must be positive")
    blocks = list(placed)
    start = window_start
    while start + duration <= window_end:
        if not conflicts(blocks, start, start + duration):
            return start, start + duration
        start += step
    return None


class ScheduleBuilder:
    """Blocks placed so far for one date, plus the clock that dates them.

    Every placement goes through this object so the non-overlap invariant is
    checked in one place.
    """

    def __init__(self, day: date, clock: ClockModel) -> None:
        self.day = day
        self.clock = clock
        self.blocks: List[PlannedBlock] = []
        self.skipped_event_ids: List[UUID] = []
        self.skipped_work_item_ids: List[UUID] = []
        self.omitted_titles: List[str] = []

    def conflicts(self, start: int, end: int) -> bool:
        return conflicts(self.blocks, start, end)

    def find_slot(
        self,
        duration: int,
        window_start: int,
        window_end: int,
        step: int = DEFAULT_STEP_MINUTES,
    ) -> Optional[Tuple[int, int]]:
        return find_slot(self.blocks, duration, window_start, window_end, step)

    def place(
        self,
        title: str,
        block_type: BlockType,
        start: int,
        end: int,
        *,
        work_item_id: UUID | None = None,
        ritual_id: UUID | None = None,
        event_id: UUID | None = None,
        description: str | None = None,
        meal_details: str | None = None,
        details: Dict[str, Any] | None = None,
    ) -> Optional[PlannedBlock]:
        """Place a block at exact minutes; returns None if it does not fit."""
        if end - start < MIN_BLOCK_MINUTES:
            logger.debug("Refusing %s: %s minutes is below the block minimum", title, end - start)
            return None
        if self.conflicts(start, end):
            logger.debug("Slot %s-%s taken, %s not placed", format_minute(start), format_minute(end), title)
            return None
        block = PlannedBlock(
            title=title,
            type=block_type,
            start_minute=start,
            end_minute=end,
            start_at=self.clock.to_absolute(self.day, start),
            end_at=self.clock.to_absolute(self.day, end),
            work_item_id=work_item_id,
            ritual_id=ritual_id,
            event_id=event_id,
            description=description,
            meal_details=meal_details,
            details=details,
        )
        self.blocks.append(block)
        return block

    def place_verbatim(
        self,
        title: str,
        block_type: BlockType,
        start_at: datetime,
        end_at: datetime,
        *,
        event_id: UUID | None = None,
        description: str | None = None,
    ) -> Optional[PlannedBlock]:
        """Copy an externally timed block unchanged; minutes only feed conflict checks."""
        start = self.clock.floor_minutes(self.day, start_at)
        end = self.clock.ceil_minutes(self.day, end_at)
        if (end_at - start_at).total_seconds() < MIN_BLOCK_MINUTES * 60:
            logger.warning("Event %s is shorter than %s minutes; not placed", title, MIN_BLOCK_MINUTES)
            return None
        if self.conflicts(start, end):
            logger.warning("Event %s collides with a protected block; not placed", title)
            return None
        block = PlannedBlock(
            title=title,
            type=block_type,
            start_minute=start,
            end_minute=end,
            start_at=start_at,
            end_at=end_at,
            event_id=event_id,
            description=description,
        )
        self.blocks.append(block)
        return block

    def sorted_blocks(self) -> List[PlannedBlock]:
        return sorted(self.blocks, key=lambda block: (block.start_at, block.end_at))

    def has_title(self, title: str) -> bool:
        wanted = title.strip().lower()
        return any(block.title.strip().lower() == wanted for block in self.blocks)
