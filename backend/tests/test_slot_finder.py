from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from dayforge.planning.builder import ScheduleBuilder, conflicts, find_slot
from dayforge.planning.clock import ClockModel

DAY = date(2025, 11, 4)


def _builder() -> ScheduleBuilder:
    return ScheduleBuilder(DAY, ClockModel())


def test_conflicts_is_half_open() -> None:
    builder = _builder()
    builder.place("Meeting", "event", 600, 660)

    assert conflicts(builder.blocks, 630, 700)
    assert conflicts(builder.blocks, 590, 601)
    assert not conflicts(builder.blocks, 660, 700)
    assert not conflicts(builder.blocks, 540, 600)


def test_find_slot_returns_first_fit() -> None:
    builder = _builder()
    builder.place("Meeting", "event", 545, 600)

    assert find_slot(builder.blocks, 30, 540, 720) == (600, 630)
    assert find_slot([], 30, 540, 720) == (540, 570)


def test_find_slot_returns_none_when_window_is_full() -> None:
    builder = _builder()
    builder.place("Workshop", "event", 540, 700)

    assert find_slot(builder.blocks, 30, 540, 720) is None
    assert find_slot([], 200, 540, 720) is None


def test_find_slot_rejects_non_positive_duration() -> None:
    with pytest.raises(ValueError):
        find_slot([], 0, 540, 720)


def test_place_refuses_short_and_overlapping_blocks() -> None:
    builder = _builder()

    assert builder.place("Blink", "ritual", 500, 504) is None
    assert builder.place("Focus", "task", 540, 600) is not None
    assert builder.place("Overlap", "task", 590, 620) is None
    assert [block.title for block in builder.blocks] == ["Focus"]


def test_place_verbatim_keeps_event_times() -> None:
    clock = ClockModel()
    builder = ScheduleBuilder(DAY, clock)
    start_at = clock.to_absolute(DAY, 600).replace(second=20)
    end_at = clock.to_absolute(DAY, 650)
    event_id = uuid4()

    block = builder.place_verbatim("Dentist", "event", start_at, end_at, event_id=event_id)

    assert block is not None
    assert block.start_at == start_at
    assert block.end_at == end_at
    assert (block.start_minute, block.end_minute) == (600, 650)
    assert block.event_id == event_id


def test_sorted_blocks_orders_by_start() -> None:
    builder = _builder()
    builder.place("Late", "task", 900, 930)
    builder.place("Early", "task", 540, 570)

    assert [block.title for block in builder.sorted_blocks()] == ["Early", "Late"]
    assert builder.has_title("  early ")
