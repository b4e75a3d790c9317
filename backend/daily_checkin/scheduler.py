"""
Scan Scheduler

Background thread that fires the two notification scans:

- reminders: once per UTC hour, for users whose reminder hour matches
- missed check-ins: once per UTC day, at ``daily_hour``

A ``RunGuard`` keeps a run of a job from overlapping another run of the same
job, whether it came from the scheduler or from a manual trigger.

Each scheduled period (hour for reminders, day for missed check-ins) is
claimed in ``scan_runs`` before sending, so a restart or a second process
inside the same period does not send again.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from daily_checkin.models.scan_run import ScanRun
from daily_checkin.services import notification_service
from daily_checkin.services.clock import Clock, day_string
from daily_checkin.services.email_service import EmailSender
from daily_checkin.services.notification_service import MISSED_CHECK_INS_JOB, REMINDERS_JOB, ScanResult

logger = logging.getLogger(__name__)


class RunGuard:
    """One non-blocking lock per job name."""

    def __init__(self):
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, job: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(job, threading.Lock())

    def is_running(self, job: str) -> bool:
        return self._lock_for(job).locked()

    @contextmanager
    def hold(self, job: str) -> Iterator[bool]:
        """Yield True if this caller now owns ``job``; False if a run is active."""
        lock = self._lock_for(job)
        acquired = lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                lock.release()


class ScanScheduler:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Clock,
        sender: EmailSender,
        guard: RunGuard,
        daily_hour: int = 1,
        poll_seconds: float = 30,
        send_delay: float = 0.0,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._sender = sender
        self._guard = guard
        self._daily_hour = daily_hour
        self._poll_seconds = poll_seconds
        self._send_delay = send_delay
        self._last_fired: dict[str, str] = {}
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="scan-scheduler", daemon=True)
        self._thread.start()
        logger.info(
            "Scheduler started: reminders hourly, missed check-ins daily at %02d:00 UTC",
            self._daily_hour,
        )

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Scheduler stopped")

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception as e:
                logger.error("Error in scheduler tick: %s", e, exc_info=True)
            self._stop.wait(self._poll_seconds)

    def tick(self) -> list[ScanResult]:
        """Fire whichever jobs are due at the clock's current time."""
        now = self._clock.now()
        results = []

        if self._due(REMINDERS_JOB, now.strftime("%Y-%m-%dT%H")):
            result = self.run_job(REMINDERS_JOB, hour=now.hour)
            if result is not None:
                results.append(result)

        if now.hour == self._daily_hour and self._due(MISSED_CHECK_INS_JOB, day_string(now.date())):
            result = self.run_job(MISSED_CHECK_INS_JOB)
            if result is not None:
                results.append(result)

        return results

    def _due(self, job: str, period_key: str) -> bool:
        """True once per (job, period) across restarts and processes sharing the database."""
        if self._last_fired.get(job) == period_key:
            return False
        claimed = self._claim(job, period_key)
        self._last_fired[job] = period_key
        return claimed

    def _claim(self, job: str, period_key: str) -> bool:
        db = self._session_factory()
        try:
            db.add(ScanRun(job=job, period_key=period_key))
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("Skipping %s for %s: period already claimed", job, period_key)
            return False
        finally:
            db.close()
        return True

    def run_job(self, job: str, hour: Optional[int] = None) -> Optional[ScanResult]:
        """Run one job in its own session. Returns None if it was skipped or failed."""
        if job not in (MISSED_CHECK_INS_JOB, REMINDERS_JOB):
            raise ValueError(f"Unknown job: {job}")

        with self._guard.hold(job) as acquired:
            if not acquired:
                logger.warning("Skipping %s run: previous run still in progress", job)
                return None

            db = self._session_factory()
            try:
                if job == MISSED_CHECK_INS_JOB:
                    return notification_service.notify_missed_check_ins(
                        db, self._clock, self._sender, send_delay=self._send_delay
                    )
                return notification_service.send_check_in_reminders(db, self._clock, self._sender, hour=hour)
            except Exception as e:
                logger.error("Error during %s run: %s", job, e, exc_info=True)
                return None
            finally:
                db.close()
