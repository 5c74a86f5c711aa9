"""Day completion logging endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from dayforge.api.schemas.day_history import DayCompletionRequest, DayCompletionResponse
from dayforge.db.deps import get_db
from dayforge.observability.metrics import log_metric
from dayforge.observability.tracing import trace
from dayforge.planning.errors import (
    CollaboratorReadError,
    CollaboratorWriteError,
    PlanningInputError,
    UserNotFoundError,
)
from dayforge.services.day_completion import log_day_completion

router = APIRouter()


@router.post("/day-history/log", response_model=DayCompletionResponse, tags=["day-history"])
def day_history_log(
    request: Request,
    payload: DayCompletionRequest,
    db: Session = Depends(get_db),
) -> DayCompletionResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {"date": payload.date.isoformat() if payload.date else None}
    try:
        with trace("day_history.log", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
            result = log_day_completion(db, payload.user_id, payload.date)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except PlanningInputError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except CollaboratorReadError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    except CollaboratorWriteError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    log_metric("day_history.log.logged", 1 if result.logged else 0, metadata={"user_id": str(payload.user_id)})
    return DayCompletionResponse(
        success=result.logged,
        date=result.day,
        message=None if result.logged else "No blocks found for this date",
        summary=result.summary,
        request_id=request_id or "",
    )
