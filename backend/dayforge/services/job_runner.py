"""Batch runners for the nightly plan and the morning completion log."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from dayforge.db.models.user import User
from dayforge.planning.errors import PlanningError
from dayforge.services.day_completion import log_day_completion
from dayforge.services.day_planner import plan_day_for_user

logger = logging.getLogger(__name__)


@dataclass
class JobRunResult:
    users_processed: int
    days_written: int
    failures: int = 0


def run_day_plan_for_user(db: Session, user_id: UUID, *, target_date: date | None = None) -> bool:
    result = plan_day_for_user(db, user_id, target_date=target_date)
    return result.blocks_created > 0


def run_day_plan_for_all_users(
    db: Session,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
    target_date: date | None = None,
) -> JobRunResult:
    ids = _normalize_user_ids(user_ids, db)
    users_processed = 0
    days_written = 0
    failures = 0
    for uid in ids:
        try:
            written = run_day_plan_for_user(db, uid, target_date=target_date)
        except PlanningError:
            failures += 1
            logger.exception("Day plan job failed for user %s", uid)
            continue
        users_processed += 1
        if written:
            days_written += 1
    return JobRunResult(users_processed=users_processed, days_written=days_written, failures=failures)


def run_day_completion_for_user(db: Session, user_id: UUID, *, target_date: date | None = None) -> bool:
    result = log_day_completion(db, user_id, target_date)
    return result.logged


def run_day_completion_for_all_users(
    db: Session,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
    target_date: date | None = None,
) -> JobRunResult:
    ids = _normalize_user_ids(user_ids, db)
    users_processed = 0
    days_written = 0
    failures = 0
    for uid in ids:
        try:
            logged = run_day_completion_for_user(db, uid, target_date=target_date)
        except PlanningError:
            failures += 1
            logger.exception("Day completion job failed for user %s", uid)
            continue
        users_processed += 1
        if logged:
            days_written += 1
    return JobRunResult(users_processed=users_processed, days_written=days_written, failures=failures)


def _normalize_user_ids(user_ids: Optional[Iterable[UUID]], db: Session) -> List[UUID]:
    if user_ids is None:
        return [row[0] for row in db.query(User.id).order_by(User.created_at.asc(), User.id.asc()).all()]
    return list(dict.fromkeys(user_ids))
