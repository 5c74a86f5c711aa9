from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta, timezone
from uuid import uuid4

import pytest

from dayforge.planning import ClockModel, DayPolicy, FixedEntry, LabelChoice, PlanningInputs, synthesize_day
from dayforge.planning.errors import PlanningInputError
from dayforge.planning.types import FixedEventSnapshot, HistorySnapshot, RitualSnapshot, WorkItemSnapshot

TUESDAY = date(2025, 11, 4)
WEDNESDAY = date(2025, 11, 5)
SATURDAY = date(2025, 11, 8)
CLOCK = ClockModel()


def _item(title: str, *, category: str = "business", priority: int = 0, est_min: int | None = None, **kwargs):
    return WorkItemSnapshot(id=uuid4(), title=title, category=category, priority=priority, est_min=est_min, **kwargs)


def _event(title: str, day: date, start: int, end: int) -> FixedEventSnapshot:
    return FixedEventSnapshot(
        id=uuid4(),
        title=title,
        start_at=CLOCK.to_absolute(day, start),
        end_at=CLOCK.to_absolute(day, end),
    )


def _assert_well_formed(blocks) -> None:
    for block in blocks:
        assert block.end_at > block.start_at
        assert block.end_at - block.start_at >= timedelta(minutes=5)
    for earlier, later in zip(blocks, blocks[1:]):
        assert earlier.end_at <= later.start_at, f"{earlier.title} overlaps {later.title}"


def _by_title(plan):
    return {block.title: block for block in plan.blocks}


def test_empty_tuesday_yields_full_skeleton() -> None:
    plan = synthesize_day(TUESDAY, PlanningInputs())

    _assert_well_formed(plan.blocks)
    spans = [(block.title, block.start_minute, block.end_minute) for block in plan.blocks]
    assert spans == [
        ("Morning routine", 360, 368),
        ("Build mode - Deep work", 370, 420),
        ("Run", 420, 450),
        ("Shower", 450, 460),
        ("Prep & Pack", 460, 480),
        ("Commute to office", 480, 510),
        ("Agency Meeting", 510, 540),
        ("Lunch", 720, 765),
        ("Plans for tomorrow", 945, 960),
        ("Commute home", 960, 990),
        ("Gym: Push", 1020, 1110),
        ("Dinner", 1110, 1155),
        ("Walk", 1175, 1200),
        ("Evening reading/work", 1200, 1260),
        ("Free time", 1260, 1280),
        ("Spinal rotation exercises", 1280, 1290),
        ("Yoga", 1290, 1300),
        ("Meditation", 1300, 1310),
        ("Brush teeth", 1310, 1315),
        ("Wind down", 1315, 1320),
        ("Sleep", 1320, 1800),
    ]
    assert plan.workout == "Push"
    assert plan.skipped_work_item_ids == []


def test_sleep_runs_from_bedtime_to_next_day_wake() -> None:
    plan = synthesize_day(TUESDAY, PlanningInputs())
    sleep = _by_title(plan)["Sleep"]

    assert sleep.type == "sleep"
    assert sleep.start_at == datetime(2025, 11, 4, 21, 0, tzinfo=timezone.utc)
    assert sleep.end_at == datetime(2025, 11, 5, 5, 0, tzinfo=timezone.utc)


def test_morning_routine_lists_two_minute_steps() -> None:
    routine = _by_title(synthesize_day(TUESDAY, PlanningInputs()))["Morning routine"]

    steps = routine.details["steps"]
    assert [step["title"] for step in steps] == ["30 push-ups", "Brush teeth", "Get dressed", "Weigh self"]
    assert all(step["end_minute"] - step["start_minute"] == 2 for step in steps)


def test_synthesis_is_deterministic() -> None:
    inputs = PlanningInputs(
        work_items=(_item("Report", priority=2, est_min=90), _item("Inbox", priority=1)),
        events=(_event("Dentist", TUESDAY, 900, 930),),
        history=(HistorySnapshot(day=date(2025, 11, 3), workout_type="Legs", workout_completed=True),),
    )

    first = synthesize_day(TUESDAY, inputs)
    second = synthesize_day(TUESDAY, inputs)

    assert first.blocks == second.blocks
    assert first.workout == "Active/Rest"


def test_oversized_work_item_is_omitted() -> None:
    huge = _item("Quarterly review", priority=5, est_min=200)
    small = _item("Reply to emails", priority=1, est_min=30)

    plan = synthesize_day(TUESDAY, PlanningInputs(work_items=(huge, small)))

    placed_ids = {block.work_item_id for block in plan.blocks if block.work_item_id}
    assert huge.id not in placed_ids
    assert plan.skipped_work_item_ids == [huge.id]
    assert _by_title(plan)["Reply to emails"].start_minute == 540
    _assert_well_formed(plan.blocks)


def test_weekend_places_personal_items_in_priority_order_with_gap() -> None:
    long_item = _item("Garden", category="personal", priority=2, est_min=60)
    short_item = _item("Call parents", category="personal", priority=1, est_min=30)
    business = _item("Slides", priority=9, est_min=30)

    plan = synthesize_day(SATURDAY, PlanningInputs(work_items=(short_item, business, long_item)))

    tasks = [block for block in plan.blocks if block.work_item_id]
    assert [(block.title, block.start_minute, block.end_minute) for block in tasks] == [
        ("Garden", 510, 570),
        ("Call parents", 580, 610),
    ]
    titles = _by_title(plan)
    assert titles["Run"].start_minute == 450
    assert "Commute to office" not in titles
    assert "Plans for tomorrow" not in titles
    _assert_well_formed(plan.blocks)


def test_fixed_event_over_lunch_is_kept_and_lunch_moves() -> None:
    event = _event("Client workshop", TUESDAY, 660, 780)
    blocked = _item("Architecture draft", priority=5, est_min=150)
    fits = _item("Code review", priority=1, est_min=60)

    plan = synthesize_day(TUESDAY, PlanningInputs(work_items=(blocked, fits), events=(event,)))

    titles = _by_title(plan)
    workshop = titles["Client workshop"]
    assert workshop.type == "event"
    assert workshop.start_at == event.start_at
    assert workshop.end_at == event.end_at
    assert workshop.event_id == event.id
    assert (titles["Lunch"].start_minute, titles["Lunch"].end_minute) == (780, 825)
    assert titles["Code review"].start_minute == 540
    assert plan.skipped_work_item_ids == [blocked.id]
    _assert_well_formed(plan.blocks)


def test_event_colliding_with_anchor_is_reported() -> None:
    clash = _event("Early call", TUESDAY, 390, 450)
    blip = _event("Ping", TUESDAY, 600, 603)

    plan = synthesize_day(TUESDAY, PlanningInputs(events=(clash, blip)))

    assert set(plan.skipped_event_ids) == {clash.id, blip.id}
    assert "Early call" not in _by_title(plan)
    assert "Build mode - Deep work" in _by_title(plan)


def test_workday_items_follow_priority_with_gap() -> None:
    low = _item("Low", priority=1, est_min=30)
    high = _item("High", priority=3, est_min=60)
    fallback = _item("Unsized", priority=0, min_block_min=20)

    plan = synthesize_day(WEDNESDAY, PlanningInputs(work_items=(low, high, fallback)))

    tasks = [(block.title, block.start_minute, block.end_minute) for block in plan.blocks if block.work_item_id]
    assert tasks == [("High", 540, 600), ("Low", 605, 635), ("Unsized", 640, 660)]


def test_workout_override_and_skip() -> None:
    history = (HistorySnapshot(day=date(2025, 11, 3), workout_type="Push", workout_completed=True),)

    explicit = synthesize_day(TUESDAY, PlanningInputs(history=history), workout=LabelChoice.explicit("Swim"))
    gym = _by_title(explicit)["Gym: Swim"]
    assert gym.details == {"type": "Swim"}
    assert "Creatine" in _by_title(explicit)["Dinner"].description

    skipped = synthesize_day(TUESDAY, PlanningInputs(history=history), workout=LabelChoice.skip())
    assert skipped.workout is None
    assert skipped.workout_label == "Skip"
    assert not any(block.title.startswith("Gym") for block in skipped.blocks)
    assert _by_title(skipped)["Dinner"].description == "Omega-3, Vitamin D3"


def test_explicit_meals_set_titles_and_details() -> None:
    plan = synthesize_day(
        TUESDAY,
        PlanningInputs(),
        lunch=LabelChoice.explicit("Chicken bowl"),
        dinner=LabelChoice.explicit("Salmon"),
    )

    titles = _by_title(plan)
    assert titles["Lunch: Chicken bowl"].meal_details == "Chicken bowl"
    assert titles["Dinner: Salmon"].type == "meal"


def test_rituals_overlay_respects_days_and_existing_titles() -> None:
    reading = RitualSnapshot(id=uuid4(), name="Reading", duration_min=15, preferred_start=time(9, 0), hard_fixed=True)
    saturday_only = RitualSnapshot(id=uuid4(), name="Long walk", duration_min=60, days_of_week=("sat",))
    duplicate = RitualSnapshot(id=uuid4(), name="Yoga", duration_min=10)
    item = _item("Budget", priority=1, est_min=30)

    plan = synthesize_day(
        WEDNESDAY,
        PlanningInputs(work_items=(item,), rituals=(reading, saturday_only, duplicate)),
    )

    titles = _by_title(plan)
    assert (titles["Reading"].start_minute, titles["Reading"].ritual_id) == (540, reading.id)
    assert "Long walk" not in titles
    assert sum(1 for block in plan.blocks if block.title == "Yoga") == 1
    assert titles["Budget"].start_minute == 555


def test_injected_meeting_table() -> None:
    policy = DayPolicy(fixed_meetings={2: (FixedEntry("Standup", 540, 555, "event"),)})

    wednesday = synthesize_day(WEDNESDAY, PlanningInputs(work_items=(_item("Proposal", est_min=30),)), policy=policy)
    tuesday = synthesize_day(TUESDAY, PlanningInputs(), policy=policy)

    assert _by_title(wednesday)["Proposal"].start_minute == 555
    assert "Standup" in _by_title(wednesday)
    assert "Agency Meeting" not in _by_title(tuesday)


def test_movable_events_shift_or_are_reported() -> None:
    haircut = replace(_event("Haircut", TUESDAY, 720, 750), hard_fixed=False)
    late = replace(_event("Late call", TUESDAY, 1260, 1300), hard_fixed=False)
    free = replace(_event("Coffee chat", TUESDAY, 900, 930), hard_fixed=False)

    plan = synthesize_day(TUESDAY, PlanningInputs(events=(late, haircut, free)))

    titles = _by_title(plan)
    assert (titles["Lunch"].start_minute, titles["Lunch"].end_minute) == (720, 765)
    assert (titles["Haircut"].start_minute, titles["Haircut"].end_minute) == (765, 795)
    assert titles["Haircut"].event_id == haircut.id
    assert titles["Coffee chat"].start_at == free.start_at
    assert plan.skipped_event_ids == [late.id]
    _assert_well_formed(plan.blocks)


def test_unrepresentable_date_is_an_input_error() -> None:
    with pytest.raises(PlanningInputError):
        synthesize_day(date(9999, 12, 31), PlanningInputs())
