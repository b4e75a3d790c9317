"""Notification scanner — turns attendance lapses into emails.

A failed send is counted and the batch moves on; nothing is retried within a
run. The next scheduled run re-evaluates who still qualifies.
"""
import logging
import time
from dataclasses import asdict, dataclass
from typing import Optional

from sqlalchemy.orm import Session

from daily_checkin.services import attendance_service
from daily_checkin.services.clock import Clock, day_string
from daily_checkin.services.email_service import EmailSender, check_in_reminder, missed_check_in_alert

logger = logging.getLogger(__name__)

MISSED_CHECK_INS_JOB = "missed_check_ins"
REMINDERS_JOB = "reminders"


@dataclass
class ScanResult:
    job: str
    recipients: int = 0
    sent: int = 0
    failed: int = 0

    def record(self, ok: bool) -> None:
        self.recipients += 1
        if ok:
            self.sent += 1
        else:
            self.failed += 1

    def as_dict(self) -> dict:
        return asdict(self)


def notify_missed_check_ins(
    db: Session,
    clock: Clock,
    sender: EmailSender,
    send_delay: float = 0.0,
) -> ScanResult:
    """Email every emergency contact of every user who missed yesterday."""
    logger.info("Starting missed check-in scan")
    result = ScanResult(job=MISSED_CHECK_INS_JOB)

    missed = attendance_service.list_users_who_missed_yesterday(db, clock)
    if not missed:
        logger.info("No users missed check-in yesterday")
        return result

    logger.info("Found %d users who missed check-in", len(missed))
    for entry in missed:
        logger.info("Processing user %s (%d contacts)", entry.user.username, len(entry.contacts))
        for contact in entry.contacts:
            subject, text, html = missed_check_in_alert(
                contact_name=contact.name,
                user_name=entry.user.username,
                missed_date=entry.missed_date,
            )
            result.record(sender.send(contact.email, subject, text, html))
            # Spread sends out to stay under SMTP rate limits
            if send_delay:
                time.sleep(send_delay)

    logger.info("Missed check-in scan completed: sent=%d failed=%d", result.sent, result.failed)
    return result


def send_check_in_reminders(
    db: Session,
    clock: Clock,
    sender: EmailSender,
    hour: Optional[int] = None,
) -> ScanResult:
    """Email users whose reminder hour is ``hour`` (default: now) and who have not checked in."""
    if hour is None:
        hour = clock.current_hour()
    logger.info("Starting reminder scan for UTC hour %d", hour)
    result = ScanResult(job=REMINDERS_JOB)
    today = day_string(clock.today())

    for user in attendance_service.list_users_needing_reminder(db, clock, hour):
        subject, text, html = check_in_reminder(user_name=user.username, today=today)
        result.record(sender.send(user.reminder_email, subject, text, html))

    logger.info("Reminder scan completed: sent=%d failed=%d", result.sent, result.failed)
    return result
