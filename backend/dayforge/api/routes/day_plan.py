"""Day planning endpoints."""
from __future__ import annotations

from datetime import date
from time import perf_counter
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from dayforge.api.schemas.day_plan import (
    BlockSummary,
    DayPlanRunRequest,
    DayPlanRunResponse,
    DayScheduleResponse,
)
from dayforge.db.deps import get_db
from dayforge.db.models.block import Block
from dayforge.observability.metrics import log_metric
from dayforge.observability.tracing import trace
from dayforge.planning.errors import (
    CollaboratorReadError,
    CollaboratorWriteError,
    PlanningInputError,
    UserNotFoundError,
)
from dayforge.services.day_planner import load_day_blocks, plan_day_for_user

router = APIRouter()


@router.post("/day-plan/run", response_model=DayPlanRunResponse, tags=["day-plan"])
def day_plan_run(
    request: Request,
    payload: DayPlanRunRequest,
    db: Session = Depends(get_db),
) -> DayPlanRunResponse:
    """Synthesize the target date and replace whatever schedule it had."""
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    try:
        result = plan_day_for_user(
            db,
            payload.user_id,
            target_date=payload.target_date,
            lunch_meal=payload.lunch_meal,
            dinner_meal=payload.dinner_meal,
            workout_type=payload.workout_type,
            notes=payload.notes,
            request_id=request_id,
        )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except PlanningInputError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except CollaboratorReadError as exc:
        log_metric("day_plan.run.success", 0, metadata={"user_id": str(payload.user_id), "stage": "read"})
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    except CollaboratorWriteError as exc:
        log_metric("day_plan.run.success", 0, metadata={"user_id": str(payload.user_id), "stage": "write"})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    latency_ms = (perf_counter() - start) * 1000
    log_metric("day_plan.run.success", 1, metadata={"user_id": str(payload.user_id)})
    log_metric(
        "day_plan.run.blocks_created",
        result.blocks_created,
        metadata={"user_id": str(payload.user_id), "date": result.day.isoformat()},
    )
    log_metric(
        "day_plan.run.skipped_work_items",
        len(result.skipped_work_item_ids),
        metadata={"user_id": str(payload.user_id)},
    )
    log_metric("day_plan.run.latency_ms", latency_ms, metadata={"user_id": str(payload.user_id)})

    return DayPlanRunResponse(
        success=True,
        date=result.day,
        blocks_created=result.blocks_created,
        workout=result.workout,
        lunch_meal=result.lunch_meal,
        dinner_meal=result.dinner_meal,
        skipped_work_item_ids=result.skipped_work_item_ids,
        skipped_event_ids=result.skipped_event_ids,
        request_id=request_id or "",
    )


@router.get("/day-plan", response_model=DayScheduleResponse, tags=["day-plan"])
def day_plan_get(
    request: Request,
    user_id: UUID = Query(..., description="User ID"),
    day: date = Query(..., alias="date", description="Local date of the schedule"),
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {"user_id": str(user_id), "date": day.isoformat(), "request_id": request_id}
    with trace("day_plan.get", metadata=metadata, user_id=str(user_id), request_id=request_id):
        try:
            blocks = load_day_blocks(db, user_id, day)
        except PlanningInputError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
        except CollaboratorReadError as exc:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))

    log_metric("day_plan.get.count", len(blocks), metadata={"user_id": str(user_id)})
    return DayScheduleResponse(
        user_id=user_id,
        date=day,
        blocks=[_serialize_block(block) for block in blocks],
        request_id=request_id or "",
    )


def _serialize_block(block: Block) -> BlockSummary:
    return BlockSummary(
        id=block.id,
        title=block.title,
        type=block.type,
        status=block.status,
        start_at=block.start_at,
        end_at=block.end_at,
        work_item_id=block.work_item_id,
        ritual_id=block.ritual_id,
        description=block.description,
        meal_details=block.meal_details,
        details=block.details,
    )
