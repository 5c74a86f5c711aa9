"""Schemas for day planning."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class DayPlanRunRequest(BaseModel):
    user_id: UUID
    target_date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=2000)
    lunch_meal: Optional[str] = Field(default=None, max_length=200)
    dinner_meal: Optional[str] = Field(default=None, max_length=200)
    workout_type: Optional[str] = Field(default=None, max_length=100)


class DayPlanRunResponse(BaseModel):
    success: bool
    date: dt.date
    blocks_created: int
    workout: str
    lunch_meal: str
    dinner_meal: str
    skipped_work_item_ids: List[UUID]
    skipped_event_ids: List[UUID]
    request_id: str


class BlockSummary(BaseModel):
    id: UUID
    title: str
    type: str
    status: str
    start_at: dt.datetime
    end_at: dt.datetime
    work_item_id: Optional[UUID]
    ritual_id: Optional[UUID]
    description: Optional[str]
    meal_details: Optional[str]
    details: Optional[Dict[str, Any]]


class DayScheduleResponse(BaseModel):
    user_id: UUID
    date: dt.date
    blocks: List[BlockSummary]
    request_id: str
