"""Rule-based day planning engine."""
from dayforge.planning.builder import ScheduleBuilder, conflicts, find_slot
from dayforge.planning.choices import LabelChoice
from dayforge.planning.clock import CentralEuropeanSeasonRule, ClockModel, ZoneInfoOffsetRule
from dayforge.planning.engine import DayPlan, PlanningInputs, synthesize_day
from dayforge.planning.policy import DayPolicy, FixedEntry
from dayforge.planning.rotation import next_workout, resolve_meal_label, resolve_workout

__all__ = [
    "CentralEuropeanSeasonRule",
    "ClockModel",
    "DayPlan",
    "DayPolicy",
    "FixedEntry",
    "LabelChoice",
    "PlanningInputs",
    "ScheduleBuilder",
    "ZoneInfoOffsetRule",
    "conflicts",
    "find_slot",
    "next_workout",
    "resolve_meal_label",
    "resolve_workout",
    "synthesize_day",
]
