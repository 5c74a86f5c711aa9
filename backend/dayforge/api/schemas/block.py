"""Schemas for block status updates."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel


class BlockStatusUpdateRequest(BaseModel):
    user_id: UUID
    status: Literal["planned", "done", "skipped"]


class BlockStatusUpdateResponse(BaseModel):
    id: UUID
    status: str
    request_id: str
