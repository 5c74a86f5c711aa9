"""Schemas for job operations endpoints."""
from __future__ import annotations

from datetime import date
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class JobRunRequest(BaseModel):
    job: Literal["day_plan", "day_completion"]
    user_id: Optional[UUID] = None
    target_date: Optional[date] = None


class JobRunResponse(BaseModel):
    job: str
    users_processed: int
    days_written: int
    failures: int
    request_id: str
