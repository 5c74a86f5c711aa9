"""The fixed daily spine: anchors, calendar events, routine and evening chain."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from dayforge.planning.builder import ScheduleBuilder
from dayforge.planning.choices import LabelChoice
from dayforge.planning.policy import DayPolicy, FixedEntry
from dayforge.planning.rotation import meal_title
from dayforge.planning.types import FixedEventSnapshot, PlannedBlock

logger = logging.getLogger(__name__)


def place_entry(
    builder: ScheduleBuilder,
    entry: FixedEntry,
    *,
    title: Optional[str] = None,
    description: Optional[str] = None,
    meal_details: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Optional[PlannedBlock]:
    """Place at the entry's own slot, else first fit in its fallback window, else omit."""
    title = title or entry.title
    extras = {
        "description": description or entry.description,
        "meal_details": meal_details,
        "details": details,
    }
    block = builder.place(title, entry.type, entry.start, entry.end, **extras)
    if block is None and entry.fallback_window:
        window_start, window_end = entry.fallback_window
        slot = builder.find_slot(entry.duration, window_start, window_end)
        if slot:
            block = builder.place(title, entry.type, slot[0], slot[1], **extras)
            logger.info("%s moved to minute %s by a fixed event", title, slot[0])
    if block is None:
        builder.omitted_titles.append(title)
        logger.info("%s omitted: its slot is occupied", title)
    return block


def place_anchors(builder: ScheduleBuilder, policy: DayPolicy) -> ScheduleBuilder:
    """Sleep, morning micro-rituals and deep work; everything later must avoid them."""
    builder.place("Sleep", "sleep", policy.bedtime_minute, policy.sleep_end_minute)

    step = policy.micro_ritual_minutes
    steps = []
    cursor = policy.wake_minute
    for name in policy.morning_steps:
        steps.append({"title": name, "start_minute": cursor, "end_minute": cursor + step})
        cursor += step
    builder.place(
        "Morning routine",
        "ritual",
        policy.wake_minute,
        cursor,
        description=", ".join(policy.morning_steps),
        details={"steps": steps},
    )

    place_entry(builder, policy.deep_work)
    return builder


def place_fixed_events(builder: ScheduleBuilder, events: Iterable[FixedEventSnapshot]) -> ScheduleBuilder:
    """Hard-fixed events, copied verbatim. Movable events are left to the overlay."""
    hard_events = [event for event in events if event.hard_fixed]
    for event in sorted(hard_events, key=lambda item: (item.start_at, item.end_at, str(item.id))):
        if event.end_at <= event.start_at:
            logger.warning("Event %s ends before it starts; ignored", event.id)
            builder.skipped_event_ids.append(event.id)
            continue
        block = builder.place_verbatim(
            event.title,
            "event",
            event.start_at,
            event.end_at,
            event_id=event.id,
            description="Calendar event",
        )
        if block is None:
            builder.skipped_event_ids.append(event.id)
    return builder


def place_morning_routine(builder: ScheduleBuilder, policy: DayPolicy, *, rest_day: bool) -> ScheduleBuilder:
    run_start = policy.rest_day_run_start if rest_day else policy.workday_run_start
    run_end = run_start + policy.run_minutes
    place_entry(builder, FixedEntry("Run", run_start, run_end))
    place_entry(builder, FixedEntry("Shower", run_end, run_end + policy.shower_minutes))
    if not rest_day:
        for entry in policy.commute_to_office:
            place_entry(builder, entry)
    for entry in policy.meetings_for(builder.day.weekday()):
        place_entry(builder, entry)
    return builder


def place_lunch(builder: ScheduleBuilder, policy: DayPolicy, lunch: LabelChoice) -> ScheduleBuilder:
    place_entry(
        builder,
        policy.lunch,
        title=meal_title(policy.lunch.title, lunch),
        meal_details=lunch.value if lunch.is_explicit else None,
    )
    return builder


def place_workday_wrap_up(builder: ScheduleBuilder, policy: DayPolicy) -> ScheduleBuilder:
    for entry in policy.workday_wrap_up:
        place_entry(builder, entry)
    return builder


def place_evening(
    builder: ScheduleBuilder,
    policy: DayPolicy,
    *,
    workout: Optional[str],
    dinner: LabelChoice,
) -> ScheduleBuilder:
    """Gym, dinner and the wind-down chain anchored on dinner end."""
    if workout is not None:
        place_entry(
            builder,
            policy.workout,
            title=f"{policy.workout.title}: {workout}",
            description=f"{workout} workout session",
            details={"type": workout},
        )

    supplements = list(policy.dinner_supplements)
    if workout is not None:
        supplements.extend(policy.training_supplements)
    place_entry(
        builder,
        policy.dinner,
        title=meal_title(policy.dinner.title, dinner),
        description=", ".join(supplements) or None,
        meal_details=dinner.value if dinner.is_explicit else None,
    )

    anchor = policy.dinner.end
    for step in policy.evening_chain:
        place_entry(builder, FixedEntry(step.title, anchor + step.offset_start, anchor + step.offset_end, step.type))
    return builder


def build_skeleton(
    builder: ScheduleBuilder,
    policy: DayPolicy,
    *,
    events: Iterable[FixedEventSnapshot] = (),
    workout: Optional[str],
    lunch: LabelChoice,
    dinner: LabelChoice,
) -> ScheduleBuilder:
    rest_day = policy.is_rest_day(builder.day.weekday())
    place_anchors(builder, policy)
    place_fixed_events(builder, events)
    place_morning_routine(builder, policy, rest_day=rest_day)
    place_lunch(builder, policy, lunch)
    if not rest_day:
        place_workday_wrap_up(builder, policy)
    place_evening(builder, policy, workout=workout, dinner=dinner)
    return builder
