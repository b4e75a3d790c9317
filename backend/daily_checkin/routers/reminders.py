"""Personal check-in reminder settings."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from daily_checkin.database import get_db
from daily_checkin.dependencies import get_current_user
from daily_checkin.exceptions import ReminderEmailRequired
from daily_checkin.models.user import User
from daily_checkin.schemas.reminder import ReminderSettings, ReminderSettingsResponse, ReminderSettingsUpdate

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/settings", response_model=ReminderSettings)
def get_settings(user: User = Depends(get_current_user)):
    return user


@router.put("/settings", response_model=ReminderSettingsResponse)
def update_settings(
    payload: ReminderSettingsUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Enable/disable the reminder email; enabling needs an address."""
    if payload.reminder_enabled and not payload.reminder_email:
        raise ReminderEmailRequired()

    user.reminder_enabled = payload.reminder_enabled
    user.reminder_email = payload.reminder_email
    user.reminder_hour = payload.reminder_hour
    db.commit()
    db.refresh(user)
    logger.info(
        "User %s reminder settings: enabled=%s hour=%d",
        user.username, user.reminder_enabled, user.reminder_hour,
    )
    return {
        "success": True,
        "message": "Check-in reminder enabled" if user.reminder_enabled else "Check-in reminder disabled",
        "settings": user,
    }
