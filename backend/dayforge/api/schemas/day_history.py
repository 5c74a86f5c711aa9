"""Schemas for logging day completion."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel


class DayCompletionRequest(BaseModel):
    user_id: UUID
    date: Optional[dt.date] = None


class DayCompletionResponse(BaseModel):
    success: bool
    date: dt.date
    message: Optional[str] = None
    summary: Dict[str, Any]
    request_id: str
