"""Deterministic day synthesis: skeleton, rituals, work, then sort."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from dayforge.planning.builder import ScheduleBuilder
from dayforge.planning.choices import LabelChoice
from dayforge.planning.clock import ClockModel
from dayforge.planning.errors import PlanningInputError
from dayforge.planning.overlay import fill_work_windows, place_movable_events, place_rituals
from dayforge.planning.policy import DayPolicy
from dayforge.planning.rotation import WORKOUT_CYCLE, resolve_workout
from dayforge.planning.skeleton import build_skeleton
from dayforge.planning.types import (
    FixedEventSnapshot,
    HistorySnapshot,
    PlannedBlock,
    RitualSnapshot,
    WorkItemSnapshot,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanningInputs:
    """Read-only collaborator data for one run. History is newest-first."""

    work_items: Tuple[WorkItemSnapshot, ...] = ()
    events: Tuple[FixedEventSnapshot, ...] = ()
    rituals: Tuple[RitualSnapshot, ...] = ()
    history: Tuple[HistorySnapshot, ...] = ()


@dataclass
class DayPlan:
    day: date
    blocks: List[PlannedBlock]
    workout: Optional[str]
    lunch: LabelChoice
    dinner: LabelChoice
    skipped_work_item_ids: List[UUID] = field(default_factory=list)
    skipped_event_ids: List[UUID] = field(default_factory=list)
    omitted_titles: List[str] = field(default_factory=list)

    @property
    def workout_label(self) -> str:
        return self.workout if self.workout is not None else LabelChoice.skip().echo()


def synthesize_day(
    day: date,
    inputs: PlanningInputs,
    *,
    lunch: LabelChoice | None = None,
    dinner: LabelChoice | None = None,
    workout: LabelChoice | None = None,
    policy: DayPolicy | None = None,
    clock: ClockModel | None = None,
    workout_cycle: Sequence[str] | None = None,
) -> DayPlan:
    """Build the full block list for ``day``. Pure: no I/O and no clock reads."""
    policy = policy or DayPolicy()
    policy.validate()
    lunch = lunch or LabelChoice.auto()
    dinner = dinner or LabelChoice.auto()
    workout_choice = workout or LabelChoice.auto()
    clock = clock or ClockModel()
    try:
        clock.day_bounds(day)
    except OverflowError as exc:
        raise PlanningInputError(f"Date {day.isoformat()} is outside the plannable range") from exc

    workout_label = resolve_workout(workout_choice, inputs.history, workout_cycle or WORKOUT_CYCLE)

    builder = ScheduleBuilder(day, clock)
    build_skeleton(
        builder,
        policy,
        events=inputs.events,
        workout=workout_label,
        lunch=lunch,
        dinner=dinner,
    )
    place_movable_events(builder, policy, inputs.events)
    place_rituals(builder, policy, inputs.rituals)
    fill_work_windows(builder, policy, inputs.work_items)

    blocks = builder.sorted_blocks()
    logger.info(
        "Synthesized %s blocks for %s (workout=%s, skipped items=%s, skipped events=%s)",
        len(blocks),
        day.isoformat(),
        workout_label or "Skip",
        len(builder.skipped_work_item_ids),
        len(builder.skipped_event_ids),
    )
    return DayPlan(
        day=day,
        blocks=blocks,
        workout=workout_label,
        lunch=lunch,
        dinner=dinner,
        skipped_work_item_ids=list(builder.skipped_work_item_ids),
        skipped_event_ids=list(builder.skipped_event_ids),
        omitted_titles=list(builder.omitted_titles),
    )
