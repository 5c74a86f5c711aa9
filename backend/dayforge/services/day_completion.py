"""Roll a planned day up into one daily_history row."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dayforge.db.models.block import Block
from dayforge.db.models.daily_history import DailyHistory
from dayforge.db.models.user import User
from dayforge.planning.clock import ClockModel
from dayforge.planning.errors import CollaboratorReadError, CollaboratorWriteError, UserNotFoundError
from dayforge.services.day_planner import build_clock, load_day_blocks

logger = logging.getLogger(__name__)

DONE_STATUSES = frozenset({"done", "completed"})
LUNCH_HOURS = range(11, 15)
DINNER_HOURS = range(17, 22)
WORKOUT_KEYWORDS = (
    ("push", "Push"),
    ("pull", "Pull"),
    ("legs", "Legs"),
    ("swim", "Active"),
    ("active", "Active"),
)
REST_LABEL = "Rest"


@dataclass
class DayCompletionResult:
    day: date
    logged: bool
    summary: Dict[str, Any] = field(default_factory=dict)


def log_day_completion(
    db: Session,
    user_id: UUID,
    target_date: date | None = None,
    *,
    clock: ClockModel | None = None,
    now: datetime | None = None,
) -> DayCompletionResult:
    """Summarize ``target_date`` (default: yesterday) and upsert it into history."""
    clock = clock or build_clock()
    day = target_date or clock.local_date(now or datetime.now(timezone.utc)) - timedelta(days=1)

    try:
        user = db.get(User, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise CollaboratorReadError(f"Loading user {user_id} failed: {exc}") from exc
    if not user:
        raise UserNotFoundError(user_id)

    blocks = load_day_blocks(db, user_id, day, clock)
    if not blocks:
        logger.info("No blocks stored for %s; nothing to log", day.isoformat())
        return DayCompletionResult(day=day, logged=False)

    entry = summarize_blocks(blocks, day, clock)
    try:
        row = (
            db.query(DailyHistory)
            .filter(DailyHistory.user_id == user_id, DailyHistory.date == day)
            .one_or_none()
        )
        if row is None:
            row = DailyHistory(user_id=user_id, date=day)
            db.add(row)
        for key, value in entry.items():
            setattr(row, key, value)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise CollaboratorWriteError(f"Saving history for {day.isoformat()} failed: {exc}") from exc

    status_mark = "done" if entry["workout_completed"] else "not done"
    summary = {
        "lunch": entry["lunch_meal"],
        "dinner": entry["dinner_meal"],
        "workout": f"{entry['workout_type']} ({status_mark})",
        "tasks_completed": entry["tasks_completed"],
        "total_work_minutes": entry["total_work_minutes"],
        "sleep_hours": entry["sleep_hours"],
    }
    logger.info("Logged completion for %s: %s", day.isoformat(), summary)
    return DayCompletionResult(day=day, logged=True, summary=summary)


def summarize_blocks(blocks: List[Block], day: date, clock: ClockModel) -> Dict[str, Any]:
    """History fields derived from one day's stored blocks."""
    meals = [block for block in blocks if block.type == "meal"]
    lunch = _first_meal_in(meals, LUNCH_HOURS, day, clock)
    dinner = _first_meal_in(meals, DINNER_HOURS, day, clock)

    workout_block = next((block for block in blocks if _is_workout(block)), None)
    workout_type = REST_LABEL
    workout_completed = False
    if workout_block is not None:
        workout_type = workout_label(workout_block)
        workout_completed = workout_block.status in DONE_STATUSES

    done_tasks = [block for block in blocks if block.type == "task" and block.status in DONE_STATUSES]
    work_minutes = sum(_minutes(block) for block in done_tasks)
    sleep_block = next((block for block in blocks if block.type == "sleep"), None)

    return {
        "lunch_meal": _meal_label(lunch),
        "dinner_meal": _meal_label(dinner),
        "workout_type": workout_type,
        "workout_completed": workout_completed,
        "tasks_completed": len(done_tasks),
        "total_work_minutes": round(work_minutes),
        "sleep_hours": round(_minutes(sleep_block) / 60, 2) if sleep_block else None,
    }


def workout_label(block: Block) -> str:
    details = block.details or {}
    label = str(details.get("type") or block.title)
    lowered = label.lower()
    for keyword, phase in WORKOUT_KEYWORDS:
        if keyword in lowered:
            return phase
    return label


def _is_workout(block: Block) -> bool:
    if block.type != "ritual":
        return False
    if (block.details or {}).get("type"):
        return True
    title = block.title.lower()
    return "gym" in title or any(keyword in title for keyword, _ in WORKOUT_KEYWORDS)


def _first_meal_in(meals: List[Block], hours: range, day: date, clock: ClockModel) -> Optional[Block]:
    for block in meals:
        hour = clock.floor_minutes(day, block.start_at) // 60
        if hour in hours:
            return block
    return None


def _meal_label(block: Optional[Block]) -> Optional[str]:
    if block is None:
        return None
    return block.meal_details or block.title


def _minutes(block: Block) -> float:
    return (block.end_at - block.start_at).total_seconds() / 60
