"""Attendance engine — derives check-in facts from a user's CheckIn rows.

All dates are UTC calendar days stored as ``YYYY-MM-DD`` strings, so string
comparison and date comparison agree.

Streak rule: walk back from today counting consecutive days. If today has no
check-in yet but yesterday does, the streak still counts from yesterday (one
day of grace before it drops to 0).
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from daily_checkin.exceptions import AlreadyCheckedIn
from daily_checkin.models.check_in import CheckIn
from daily_checkin.models.contact import EmergencyContact
from daily_checkin.models.user import User
from daily_checkin.services.clock import Clock, day_string

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


@dataclass
class MissedCheckIn:
    """A user with contacts who did not check in on ``missed_date``."""

    user: User
    contacts: list[EmergencyContact]
    missed_date: str


def _has_check_in_on(db: Session, user_id: int, day: str) -> bool:
    return db.query(
        exists().where(CheckIn.user_id == user_id, CheckIn.check_in_date == day)
    ).scalar()


def has_checked_in_today(db: Session, clock: Clock, user_id: int) -> bool:
    """True iff a check-in exists for the current UTC date."""
    return _has_check_in_on(db, user_id, day_string(clock.today()))


def record_check_in(db: Session, clock: Clock, user_id: int) -> CheckIn:
    """Insert today's check-in, or raise AlreadyCheckedIn.

    The pre-check only saves a round-trip; the unique index on
    (user_id, check_in_date) decides concurrent attempts.
    """
    today = day_string(clock.today())
    if _has_check_in_on(db, user_id, today):
        raise AlreadyCheckedIn()

    check_in = CheckIn(user_id=user_id, check_in_date=today)
    db.add(check_in)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Concurrent check-in for user %s on %s rejected by unique index", user_id, today)
        raise AlreadyCheckedIn()
    db.refresh(check_in)
    logger.info("User %s checked in for %s", user_id, today)
    return check_in


def get_last_check_in(db: Session, user_id: int) -> Optional[CheckIn]:
    """Most recent check-in for the user, if any."""
    return (
        db.query(CheckIn)
        .filter(CheckIn.user_id == user_id)
        .order_by(CheckIn.check_in_date.desc())
        .first()
    )


def streak_from_dates(check_in_dates: list[date], today: date) -> int:
    """Count consecutive check-in days ending today (or yesterday, within grace).

    ``check_in_dates`` must be sorted most recent first.
    """
    streak = 0
    expected = today
    for day in check_in_dates:
        if day == expected:
            streak += 1
            expected = expected - ONE_DAY
        elif streak == 0 and day == expected - ONE_DAY:
            # No check-in today yet, but yesterday counts
            streak += 1
            expected = day - ONE_DAY
        else:
            break
    return streak


def compute_streak(db: Session, clock: Clock, user_id: int) -> int:
    """Consecutive-day streak for the user; 0 when there are no check-ins."""
    rows = (
        db.query(CheckIn.check_in_date)
        .filter(CheckIn.user_id == user_id)
        .order_by(CheckIn.check_in_date.desc())
        .all()
    )
    dates = [date.fromisoformat(row.check_in_date) for row in rows]
    return streak_from_dates(dates, clock.today())


def list_users_who_missed_yesterday(db: Session, clock: Clock) -> list[MissedCheckIn]:
    """Users with at least one emergency contact and no check-in yesterday.

    One query instead of a lookup per user: contact existence and the missing
    check-in row are both expressed as correlated EXISTS clauses.
    """
    yesterday = day_string(clock.today() - ONE_DAY)
    has_contact = exists().where(EmergencyContact.user_id == User.id)
    checked_in = exists().where(CheckIn.user_id == User.id, CheckIn.check_in_date == yesterday)

    users = (
        db.query(User)
        .options(selectinload(User.contacts))
        .filter(has_contact, ~checked_in)
        .order_by(User.id)
        .all()
    )
    return [MissedCheckIn(user=u, contacts=list(u.contacts), missed_date=yesterday) for u in users]


def list_users_needing_reminder(db: Session, clock: Clock, hour: int) -> list[User]:
    """Users whose reminder fires at ``hour`` and who have not checked in today."""
    today = day_string(clock.today())
    checked_in_today = exists().where(CheckIn.user_id == User.id, CheckIn.check_in_date == today)

    return (
        db.query(User)
        .filter(
            User.reminder_enabled.is_(True),
            User.reminder_hour == hour,
            User.reminder_email.isnot(None),
            User.reminder_email != "",
            ~checked_in_today,
        )
        .order_by(User.id)
        .all()
    )
