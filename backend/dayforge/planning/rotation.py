"""Workout rotation and meal label selection."""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from dayforge.planning.choices import LabelChoice
from dayforge.planning.types import HistorySnapshot

WORKOUT_CYCLE: tuple[str, ...] = ("Push", "Pull", "Legs", "Active/Rest")


def _base_phase(label: str) -> str:
    return label.split("/")[0].strip().lower()


def phase_index(label: str, cycle: Sequence[str] = WORKOUT_CYCLE) -> Optional[int]:
    """Index of the first cycle phase whose base name occurs in ``label``."""
    lowered = label.lower()
    for index, phase in enumerate(cycle):
        if _base_phase(phase) in lowered:
            return index
    return None


def next_workout(history: Iterable[HistorySnapshot], cycle: Sequence[str] = WORKOUT_CYCLE) -> str:
    """Phase following the newest completed workout; history must be newest-first."""
    last = next((entry for entry in history if entry.workout_type and entry.workout_completed), None)
    if last is None:
        return cycle[0]
    index = phase_index(last.workout_type, cycle)
    if index is None:
        return cycle[0]
    return cycle[(index + 1) % len(cycle)]


def resolve_workout(
    choice: LabelChoice,
    history: Iterable[HistorySnapshot],
    cycle: Sequence[str] = WORKOUT_CYCLE,
) -> Optional[str]:
    """Label for the gym block, or None when the workout is skipped."""
    if choice.is_skip:
        return None
    if choice.is_explicit:
        return choice.value
    return next_workout(history, cycle)


def resolve_meal_label(choice: LabelChoice, generic: str) -> str:
    """The explicit meal label verbatim, otherwise the generic placeholder."""
    if choice.is_explicit and choice.value:
        return choice.value
    return generic


def meal_title(generic: str, choice: LabelChoice) -> str:
    if choice.is_explicit and choice.value:
        return f"{generic}: {resolve_meal_label(choice, generic)}"
    return generic
