"""Deterministic day planner service: fetch inputs, synthesize, replace."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dayforge.core.config import Settings, settings
from dayforge.core.context import plan_date_ctx_var
from dayforge.db.models.block import Block
from dayforge.db.models.daily_history import DailyHistory
from dayforge.db.models.fixed_event import FixedEvent
from dayforge.db.models.ritual import Ritual
from dayforge.db.models.user import User
from dayforge.db.models.work_item import WorkItem
from dayforge.observability.tracing import trace
from dayforge.planning.choices import LabelChoice
from dayforge.planning.clock import CentralEuropeanSeasonRule, ClockModel, ZoneInfoOffsetRule
from dayforge.planning.engine import DayPlan, PlanningInputs, synthesize_day
from dayforge.planning.errors import (
    CollaboratorReadError,
    CollaboratorWriteError,
    PlanningInputError,
    UserNotFoundError,
)
from dayforge.planning.policy import DayPolicy
from dayforge.planning.types import (
    FixedEventSnapshot,
    HistorySnapshot,
    PlannedBlock,
    RitualSnapshot,
    WorkItemSnapshot,
)
from dayforge.services.locks import plan_date_lock

logger = logging.getLogger(__name__)

OPEN_STATUS = "open"


@dataclass
class PlanRunResult:
    day: date
    blocks_created: int
    workout: str
    lunch_meal: str
    dinner_meal: str
    skipped_work_item_ids: List[UUID] = field(default_factory=list)
    skipped_event_ids: List[UUID] = field(default_factory=list)


def build_clock(config: Settings | None = None) -> ClockModel:
    """Clock for the configured civil timezone rule."""
    config = config or settings
    if config.planner_offset_rule == "zoneinfo":
        return ClockModel(ZoneInfoOffsetRule(config.planner_timezone))
    return ClockModel(CentralEuropeanSeasonRule())


def resolve_target_date(
    requested: date | None,
    *,
    clock: ClockModel,
    now: datetime | None = None,
) -> date:
    """Requested date, or tomorrow in the planner's timezone.

    Raises PlanningInputError for dates whose day (and the following
    morning) cannot be expressed as UTC timestamps.
    """
    if requested is None:
        moment = now or datetime.now(timezone.utc)
        requested = clock.local_date(moment) + timedelta(days=1)
    try:
        clock.day_bounds(requested)
    except OverflowError as exc:
        raise PlanningInputError(f"Date {requested.isoformat()} is outside the plannable range") from exc
    return requested


def plan_day_for_user(
    db: Session,
    user_id: UUID,
    *,
    target_date: date | None = None,
    lunch_meal: str | None = None,
    dinner_meal: str | None = None,
    workout_type: str | None = None,
    notes: str | None = None,
    policy: DayPolicy | None = None,
    clock: ClockModel | None = None,
    request_id: str | None = None,
) -> PlanRunResult:
    """
    Plan one date for a user and commit it as that date's only schedule.

    ``notes`` is accepted for request compatibility and does not influence
    the deterministic engine. Raises PlanningInputError, CollaboratorReadError
    or CollaboratorWriteError; nothing is written unless the whole run succeeds.
    """
    clock = clock or build_clock()
    day = resolve_target_date(target_date, clock=clock)
    lunch = LabelChoice.parse(lunch_meal)
    dinner = LabelChoice.parse(dinner_meal)
    workout = LabelChoice.parse(workout_type, allow_skip=True)
    if notes:
        logger.debug("Planning notes ignored by the deterministic planner (%s chars)", len(notes))

    token = plan_date_ctx_var.set(day.isoformat())
    try:
        with trace(
            "day_plan.run",
            metadata={
                "date": day.isoformat(),
                "lunch": lunch.echo(),
                "dinner": dinner.echo(),
                "workout_override": workout.echo(),
            },
            user_id=str(user_id),
            request_id=request_id,
        ) as planning_trace:
            with plan_date_lock(db, user_id, day):
                inputs = load_planning_inputs(db, user_id, day, clock)
                plan = synthesize_day(
                    day,
                    inputs,
                    lunch=lunch,
                    dinner=dinner,
                    workout=workout,
                    policy=policy,
                    clock=clock,
                )
                replace_day_blocks(db, user_id, plan, clock)
            if planning_trace:
                planning_trace.update(
                    metadata={
                        "blocks_created": len(plan.blocks),
                        "workout": plan.workout_label,
                        "skipped_work_items": len(plan.skipped_work_item_ids),
                        "skipped_events": len(plan.skipped_event_ids),
                    }
                )
    finally:
        plan_date_ctx_var.reset(token)

    logger.info("Planned %s for user %s: %s blocks", day.isoformat(), user_id, len(plan.blocks))
    return PlanRunResult(
        day=day,
        blocks_created=len(plan.blocks),
        workout=plan.workout_label,
        lunch_meal=lunch.echo(),
        dinner_meal=dinner.echo(),
        skipped_work_item_ids=plan.skipped_work_item_ids,
        skipped_event_ids=plan.skipped_event_ids,
    )


def load_planning_inputs(db: Session, user_id: UUID, day: date, clock: ClockModel) -> PlanningInputs:
    """Snapshot everything the engine reads for ``day``."""
    day_start, day_end = clock.day_bounds(day)
    try:
        if not db.get(User, user_id):
            raise UserNotFoundError(user_id)
        work_items = (
            db.query(WorkItem)
            .filter(WorkItem.user_id == user_id, WorkItem.status == OPEN_STATUS)
            .order_by(WorkItem.priority.desc(), WorkItem.created_at.asc(), WorkItem.id.asc())
            .all()
        )
        events = (
            db.query(FixedEvent)
            .filter(
                FixedEvent.user_id == user_id,
                FixedEvent.start_at >= day_start,
                FixedEvent.start_at < day_end,
            )
            .order_by(FixedEvent.start_at.asc(), FixedEvent.id.asc())
            .all()
        )
        rituals = db.query(Ritual).filter(Ritual.user_id == user_id).order_by(Ritual.name.asc()).all()
        history = (
            db.query(DailyHistory)
            .filter(DailyHistory.user_id == user_id, DailyHistory.date < day)
            .order_by(DailyHistory.date.desc())
            .limit(settings.history_window_days)
            .all()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise CollaboratorReadError(f"Loading planning inputs for {day.isoformat()} failed: {exc}") from exc

    logger.debug(
        "Loaded %s work items, %s events, %s rituals, %s history days",
        len(work_items),
        len(events),
        len(rituals),
        len(history),
    )
    return PlanningInputs(
        work_items=tuple(_work_item_snapshot(row) for row in work_items),
        events=tuple(
            FixedEventSnapshot(
                id=row.id,
                title=row.title,
                start_at=row.start_at,
                end_at=row.end_at,
                hard_fixed=bool(row.hard_fixed),
            )
            for row in events
        ),
        rituals=tuple(_ritual_snapshot(row) for row in rituals),
        history=tuple(
            HistorySnapshot(
                day=row.date,
                workout_type=row.workout_type,
                workout_completed=bool(row.workout_completed),
                lunch_meal=row.lunch_meal,
                dinner_meal=row.dinner_meal,
            )
            for row in history
        ),
    )


def replace_day_blocks(db: Session, user_id: UUID, plan: DayPlan, clock: ClockModel) -> List[Block]:
    """Delete the user's blocks starting in the local day and insert the plan, in one commit."""
    day_start, day_end = clock.day_bounds(plan.day)
    rows = [_block_row(user_id, block) for block in plan.blocks]
    try:
        deleted = (
            db.query(Block)
            .filter(
                Block.user_id == user_id,
                Block.start_at >= day_start,
                Block.start_at < day_end,
            )
            .delete(synchronize_session=False)
        )
        db.add_all(rows)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Replacing blocks for %s failed; previous schedule kept", plan.day.isoformat())
        raise CollaboratorWriteError(f"Saving the plan for {plan.day.isoformat()} failed: {exc}") from exc

    logger.debug("Replaced %s old blocks with %s new ones", deleted, len(rows))
    return rows


def load_day_blocks(db: Session, user_id: UUID, day: date, clock: ClockModel | None = None) -> List[Block]:
    """Stored blocks starting inside the local day, in start order."""
    clock = clock or build_clock()
    day = resolve_target_date(day, clock=clock)
    day_start, day_end = clock.day_bounds(day)
    try:
        return (
            db.query(Block)
            .filter(
                Block.user_id == user_id,
                Block.start_at >= day_start,
                Block.start_at < day_end,
            )
            .order_by(Block.start_at.asc(), Block.end_at.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise CollaboratorReadError(f"Loading blocks for {day.isoformat()} failed: {exc}") from exc


def _work_item_snapshot(row: WorkItem) -> WorkItemSnapshot:
    return WorkItemSnapshot(
        id=row.id,
        title=row.title,
        category=row.category,
        priority=row.priority or 0,
        description=row.description,
        est_min=row.est_min,
        min_block_min=row.min_block_min,
    )


def _ritual_snapshot(row: Ritual) -> RitualSnapshot:
    days = row.days_of_week or []
    return RitualSnapshot(
        id=row.id,
        name=row.name,
        duration_min=row.duration_min,
        preferred_start=row.preferred_start,
        preferred_end=row.preferred_end,
        hard_fixed=bool(row.hard_fixed),
        days_of_week=tuple(str(value) for value in days),
    )


def _block_row(user_id: UUID, block: PlannedBlock) -> Block:
    return Block(
        user_id=user_id,
        title=block.title,
        type=block.type,
        status=block.status,
        start_at=block.start_at,
        end_at=block.end_at,
        work_item_id=block.work_item_id,
        ritual_id=block.ritual_id,
        description=block.description,
        meal_details=block.meal_details,
        details=_block_details(block),
    )


def _block_details(block: PlannedBlock) -> Optional[dict]:
    details = dict(block.details or {})
    if block.event_id:
        details["event_id"] = str(block.event_id)
    return details or None
