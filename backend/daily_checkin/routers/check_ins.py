"""Daily check-in routes — delegate to attendance_service."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from daily_checkin.database import get_db
from daily_checkin.dependencies import get_clock, get_current_user
from daily_checkin.models.user import User
from daily_checkin.schemas.check_in import CheckInResponse, CheckInStatus
from daily_checkin.services import attendance_service
from daily_checkin.services.clock import Clock

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED)
def check_in(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Record today's check-in and return the updated streak."""
    record = attendance_service.record_check_in(db, clock, user.id)
    streak = attendance_service.compute_streak(db, clock, user.id)
    return {"success": True, "check_in": record, "streak_days": streak}


@router.get("/status", response_model=CheckInStatus)
def check_in_status(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return {
        "has_checked_in_today": attendance_service.has_checked_in_today(db, clock, user.id),
        "last_check_in": attendance_service.get_last_check_in(db, user.id),
        "streak_days": attendance_service.compute_streak(db, clock, user.id),
    }
