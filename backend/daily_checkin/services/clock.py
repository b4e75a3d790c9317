"""UTC clock used for every "today" / "current hour" decision."""
from datetime import date, datetime

import pytz


def day_string(day: date) -> str:
    """Format a calendar day as stored in ``check_ins.check_in_date``."""
    return day.strftime("%Y-%m-%d")


class Clock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(pytz.utc)

    def today(self) -> date:
        return self.now().date()

    def current_hour(self) -> int:
        return self.now().hour


class FixedClock(Clock):
    """Clock pinned to a given moment. Naive datetimes are taken as UTC."""

    def __init__(self, moment: datetime):
        self.set(moment)

    def set(self, moment: datetime) -> None:
        if moment.tzinfo is None:
            moment = pytz.utc.localize(moment)
        self._moment = moment.astimezone(pytz.utc)

    def now(self) -> datetime:
        return self._moment
