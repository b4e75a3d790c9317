"""Admin routes — run the notification scans on demand."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from daily_checkin.config import settings
from daily_checkin.database import get_db
from daily_checkin.dependencies import get_clock, get_email_sender, get_run_guard, require_admin
from daily_checkin.exceptions import JobAlreadyRunning
from daily_checkin.models.user import User
from daily_checkin.scheduler import RunGuard
from daily_checkin.schemas.reminder import ScanResultOut
from daily_checkin.services import notification_service
from daily_checkin.services.clock import Clock
from daily_checkin.services.email_service import EmailSender
from daily_checkin.services.notification_service import MISSED_CHECK_INS_JOB, REMINDERS_JOB

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/scans/missed-check-ins", response_model=ScanResultOut)
def trigger_missed_check_in_scan(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    sender: EmailSender = Depends(get_email_sender),
    guard: RunGuard = Depends(get_run_guard),
):
    """Alert emergency contacts of everyone who missed yesterday, now."""
    logger.info("Manual missed check-in scan requested by %s", admin.username)
    with guard.hold(MISSED_CHECK_INS_JOB) as acquired:
        if not acquired:
            raise JobAlreadyRunning(MISSED_CHECK_INS_JOB)
        result = notification_service.notify_missed_check_ins(
            db, clock, sender, send_delay=settings.EMAIL_SEND_DELAY_SECONDS
        )
    return result.as_dict()


@router.post("/scans/reminders", response_model=ScanResultOut)
def trigger_reminder_scan(
    hour: Optional[int] = Query(None, ge=0, le=23, description="UTC hour; defaults to the current hour"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    sender: EmailSender = Depends(get_email_sender),
    guard: RunGuard = Depends(get_run_guard),
):
    logger.info("Manual reminder scan requested by %s (hour=%s)", admin.username, hour)
    with guard.hold(REMINDERS_JOB) as acquired:
        if not acquired:
            raise JobAlreadyRunning(REMINDERS_JOB)
        result = notification_service.send_check_in_reminders(db, clock, sender, hour=hour)
    return result.as_dict()
