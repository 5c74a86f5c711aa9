"""Flexible content laid over the skeleton: movable events, user rituals and backlog work."""
from __future__ import annotations

import logging
import math
from datetime import time
from typing import Iterable, List, Optional, Set
from uuid import UUID

from dayforge.planning.builder import ScheduleBuilder
from dayforge.planning.policy import DayPolicy
from dayforge.planning.types import MIN_BLOCK_MINUTES, FixedEventSnapshot, RitualSnapshot, WorkItemSnapshot

logger = logging.getLogger(__name__)

WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def _minute_of(value: Optional[time]) -> Optional[int]:
    if value is None:
        return None
    return value.hour * 60 + value.minute


def ritual_applies(ritual: RitualSnapshot, weekday: int) -> bool:
    if not ritual.days_of_week:
        return True
    wanted = WEEKDAY_KEYS[weekday]
    return any(str(day).strip().lower()[:3] == wanted for day in ritual.days_of_week)


def place_movable_events(
    builder: ScheduleBuilder,
    policy: DayPolicy,
    events: Iterable[FixedEventSnapshot],
) -> ScheduleBuilder:
    """Events that are not hard-fixed keep their time when free, else take the next free slot before bedtime."""
    soft_events = [event for event in events if not event.hard_fixed]
    for event in sorted(soft_events, key=lambda item: (item.start_at, item.end_at, str(item.id))):
        duration = math.ceil((event.end_at - event.start_at).total_seconds() / 60)
        if duration < MIN_BLOCK_MINUTES:
            logger.warning("Movable event %s is shorter than %s minutes; not placed", event.id, MIN_BLOCK_MINUTES)
            builder.skipped_event_ids.append(event.id)
            continue
        start = builder.clock.floor_minutes(builder.day, event.start_at)
        extras = {"event_id": event.id, "description": "Calendar event (movable)"}
        block = builder.place(event.title, "event", start, start + duration, **extras)
        if block is None:
            slot = builder.find_slot(duration, start, policy.bedtime_minute, policy.slot_step_minutes)
            block = builder.place(event.title, "event", *slot, **extras) if slot else None
            if block is not None:
                logger.info("Movable event %s shifted to minute %s", event.id, slot[0])
        if block is None:
            builder.skipped_event_ids.append(event.id)
    return builder


def place_rituals(
    builder: ScheduleBuilder,
    policy: DayPolicy,
    rituals: Iterable[RitualSnapshot],
) -> ScheduleBuilder:
    """Place user rituals for the weekday that the skeleton does not already cover."""
    weekday = builder.day.weekday()
    ordered = sorted(rituals, key=lambda ritual: (_minute_of(ritual.preferred_start) or 0, ritual.name, str(ritual.id)))
    for ritual in ordered:
        if not ritual_applies(ritual, weekday) or builder.has_title(ritual.name):
            continue
        duration = max(ritual.duration_min, MIN_BLOCK_MINUTES)
        preferred_start = _minute_of(ritual.preferred_start)
        if ritual.hard_fixed and preferred_start is not None:
            block = builder.place(ritual.name, "ritual", preferred_start, preferred_start + duration, ritual_id=ritual.id)
        else:
            window_start = preferred_start if preferred_start is not None else policy.wake_minute
            window_end = _minute_of(ritual.preferred_end) or policy.bedtime_minute
            slot = builder.find_slot(duration, window_start, window_end, policy.slot_step_minutes)
            block = builder.place(ritual.name, "ritual", *slot, ritual_id=ritual.id) if slot else None
        if block is None:
            builder.omitted_titles.append(ritual.name)
            logger.info("Ritual %s omitted: no free slot", ritual.name)
    return builder


def eligible_work_items(items: Iterable[WorkItemSnapshot], category: str) -> List[WorkItemSnapshot]:
    """Items of ``category``, highest priority first; ties keep their input order."""
    matching = [item for item in items if item.category == category]
    return sorted(matching, key=lambda item: -item.priority)


def fill_work_windows(
    builder: ScheduleBuilder,
    policy: DayPolicy,
    items: Iterable[WorkItemSnapshot],
) -> ScheduleBuilder:
    """First-fit each window from a cursor; items that do not fit are left out."""
    rest_day = policy.is_rest_day(builder.day.weekday())
    category = policy.rest_day_category if rest_day else policy.workday_category
    windows = policy.rest_day_windows if rest_day else policy.workday_windows
    gap = policy.rest_day_gap_minutes if rest_day else policy.workday_gap_minutes

    candidates = eligible_work_items(items, category)
    placed: Set[UUID] = set()
    for window in windows:
        cursor = window.start
        for item in candidates:
            if item.id in placed:
                continue
            slot = builder.find_slot(item.duration_minutes, cursor, window.end, policy.slot_step_minutes)
            if slot is None:
                continue
            builder.place(
                item.title,
                "task",
                slot[0],
                slot[1],
                work_item_id=item.id,
                description=item.description,
            )
            placed.add(item.id)
            cursor = slot[1] + gap
        logger.debug("Window %s filled up to minute %s", window.name, cursor)

    builder.skipped_work_item_ids.extend(item.id for item in candidates if item.id not in placed)
    return builder
