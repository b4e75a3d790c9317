"""Pydantic schemas for check-ins."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CheckInOut(BaseModel):
    id: int
    check_in_date: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CheckInResponse(BaseModel):
    success: bool = True
    check_in: CheckInOut
    streak_days: int


class CheckInStatus(BaseModel):
    has_checked_in_today: bool
    last_check_in: Optional[CheckInOut] = None
    streak_days: int
