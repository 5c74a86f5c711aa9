"""Day structure policy: the fixed spine every plan is built around.

Times are minutes since local midnight. The defaults describe one person's
routine; callers may inject a different :class:`DayPolicy`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional, Tuple

from dayforge.planning.types import BlockType


@dataclass(frozen=True)
class FixedEntry:
    title: str
    start: int
    end: int
    type: BlockType = "ritual"
    description: Optional[str] = None
    # Where the entry may move when a hard-fixed event takes its slot.
    fallback_window: Optional[Tuple[int, int]] = None

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ChainStep:
    """Evening step placed at an offset from dinner end."""

    title: str
    offset_start: int
    offset_end: int
    type: BlockType = "ritual"


@dataclass(frozen=True)
class WorkWindow:
    name: str
    start: int
    end: int


DEFAULT_FIXED_MEETINGS: Mapping[int, Tuple[FixedEntry, ...]] = {
    0: (FixedEntry("Team Meeting", 780, 840, "event"),),
    1: (FixedEntry("Agency Meeting", 510, 540, "event"),),
    4: (FixedEntry("PS:News Meeting", 510, 540, "event"),),
}

DEFAULT_EVENING_CHAIN: Tuple[ChainStep, ...] = (
    ChainStep("Walk", 20, 45),
    ChainStep("Evening reading/work", 45, 105, "buffer"),
    ChainStep("Free time", 105, 125, "buffer"),
    ChainStep("Spinal rotation exercises", 125, 135),
    ChainStep("Yoga", 135, 145),
    ChainStep("Meditation", 145, 155),
    ChainStep("Brush teeth", 155, 160),
    ChainStep("Wind down", 160, 165, "buffer"),
)


@dataclass(frozen=True)
class DayPolicy:
    wake_minute: int = 360
    bedtime_minute: int = 1320
    micro_ritual_minutes: int = 2
    morning_steps: Tuple[str, ...] = ("30 push-ups", "Brush teeth", "Get dressed", "Weigh self")
    deep_work: FixedEntry = FixedEntry(
        "Build mode - Deep work", 370, 420, "task", description="Morning deep work session"
    )
    workday_run_start: int = 420
    rest_day_run_start: int = 450
    run_minutes: int = 30
    shower_minutes: int = 10
    commute_to_office: Tuple[FixedEntry, ...] = (
        FixedEntry("Prep & Pack", 460, 480),
        FixedEntry("Commute to office", 480, 510, "commute"),
    )
    fixed_meetings: Mapping[int, Tuple[FixedEntry, ...]] = field(
        default_factory=lambda: dict(DEFAULT_FIXED_MEETINGS)
    )
    lunch: FixedEntry = FixedEntry("Lunch", 720, 765, "meal", fallback_window=(690, 870))
    workday_wrap_up: Tuple[FixedEntry, ...] = (
        FixedEntry("Plans for tomorrow", 945, 960),
        FixedEntry("Commute home", 960, 990, "commute"),
    )
    workout: FixedEntry = FixedEntry("Gym", 1020, 1110)
    dinner: FixedEntry = FixedEntry("Dinner", 1110, 1155, "meal")
    dinner_supplements: Tuple[str, ...] = ("Omega-3", "Vitamin D3")
    training_supplements: Tuple[str, ...] = ("Creatine",)
    evening_chain: Tuple[ChainStep, ...] = DEFAULT_EVENING_CHAIN
    workday_windows: Tuple[WorkWindow, ...] = (
        WorkWindow("morning", 540, 720),
        WorkWindow("afternoon", 765, 945),
    )
    rest_day_windows: Tuple[WorkWindow, ...] = (WorkWindow("day", 510, 1020),)
    workday_gap_minutes: int = 5
    rest_day_gap_minutes: int = 10
    rest_days: FrozenSet[int] = frozenset({5, 6})
    workday_category: str = "business"
    rest_day_category: str = "personal"
    slot_step_minutes: int = 5

    def is_rest_day(self, weekday: int) -> bool:
        return weekday in self.rest_days

    def meetings_for(self, weekday: int) -> Tuple[FixedEntry, ...]:
        return tuple(self.fixed_meetings.get(weekday, ()))

    @property
    def sleep_end_minute(self) -> int:
        """Wake minute of the following day, counted from today's midnight."""
        return 24 * 60 + self.wake_minute

    def validate(self) -> None:
        chain_end = self.dinner.end + max((step.offset_end for step in self.evening_chain), default=0)
        if chain_end > self.bedtime_minute:
            raise ValueError("evening chain runs past bedtime")
        if not 0 <= self.wake_minute < self.bedtime_minute <= 24 * 60:
            raise ValueError("wake and bedtime must fall inside one day, wake first")
        if len(self.morning_steps) * self.micro_ritual_minutes < 5:
            raise ValueError("morning routine must last at least five minutes")
