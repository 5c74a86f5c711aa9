"""Operational endpoints for scheduler jobs."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from dayforge.api.schemas.jobs import JobRunRequest, JobRunResponse
from dayforge.core.config import settings
from dayforge.db.deps import get_db
from dayforge.observability.metrics import log_metric
from dayforge.observability.tracing import trace
from dayforge.planning.errors import PlanningError, UserNotFoundError
from dayforge.services.job_runner import (
    JobRunResult,
    run_day_completion_for_all_users,
    run_day_completion_for_user,
    run_day_plan_for_all_users,
    run_day_plan_for_user,
)

router = APIRouter()


@router.get("/jobs", tags=["jobs"])
def get_jobs_config(request: Request) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("jobs.config", metadata={"request_id": request_id}, request_id=request_id):
        data = {
            "scheduler_enabled": settings.scheduler_enabled,
            "schedule": {
                "timezone": settings.scheduler_timezone,
                "day_plan_time": f"{settings.day_plan_job_hour:02d}:{settings.day_plan_job_minute:02d}",
                "day_completion_time": (
                    f"{settings.day_completion_job_hour:02d}:{settings.day_completion_job_minute:02d}"
                ),
            },
        }
    return {**data, "request_id": request_id or ""}


@router.post("/jobs/run-now", response_model=JobRunResponse, tags=["jobs"])
def run_job_now(
    request: Request,
    payload: JobRunRequest,
    db: Session = Depends(get_db),
) -> JobRunResponse:
    if not settings.debug:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Run-now only allowed in debug mode")

    request_id = getattr(request.state, "request_id", None)
    metadata = {"job": payload.job, "request_id": request_id}
    start = perf_counter()
    with trace("jobs.run_now", metadata=metadata, request_id=request_id):
        result = _run_job(db, payload)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("jobs.run_now.success", 1, metadata={"job": payload.job})
    log_metric("jobs.run_now.latency_ms", latency_ms, metadata={"job": payload.job})

    return JobRunResponse(
        job=payload.job,
        users_processed=result.users_processed,
        days_written=result.days_written,
        failures=result.failures,
        request_id=request_id or "",
    )


def _run_job(db: Session, payload: JobRunRequest) -> JobRunResult:
    if payload.job == "day_plan":
        per_user, all_users = run_day_plan_for_user, run_day_plan_for_all_users
    else:
        per_user, all_users = run_day_completion_for_user, run_day_completion_for_all_users

    if not payload.user_id:
        return all_users(db, target_date=payload.target_date)
    try:
        written = per_user(db, payload.user_id, target_date=payload.target_date)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except PlanningError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    return JobRunResult(users_processed=1, days_written=1 if written else 0)
