"""Block status updates."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from dayforge.api.schemas.block import BlockStatusUpdateRequest, BlockStatusUpdateResponse
from dayforge.db.deps import get_db
from dayforge.db.models.block import Block
from dayforge.observability.metrics import log_metric
from dayforge.observability.tracing import trace

router = APIRouter()


@router.patch("/blocks/{block_id}", response_model=BlockStatusUpdateResponse, tags=["blocks"])
def update_block_status(
    block_id: UUID,
    payload: BlockStatusUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> BlockStatusUpdateResponse:
    """Mark a block done, skipped or back to planned."""
    block = db.get(Block, block_id)
    if not block:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Block not found")
    if block.user_id != payload.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Block does not belong to user")

    request_id = getattr(http_request.state, "request_id", None)
    changed = block.status != payload.status
    metadata = {
        "route": f"/blocks/{block_id}",
        "block_id": str(block_id),
        "status": payload.status,
        "changed": changed,
    }
    try:
        with trace("block.status", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
            if changed:
                block.status = payload.status
                db.add(block)
                db.commit()
    except Exception:
        db.rollback()
        raise

    log_metric("block.status.changed", 1 if changed else 0, metadata={"block_id": str(block_id)})
    return BlockStatusUpdateResponse(id=block.id, status=block.status, request_id=request_id or "")
