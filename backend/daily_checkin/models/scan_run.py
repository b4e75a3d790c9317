"""ScanRun ORM model — one row per scheduled job per period, claimed before sending."""
from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from daily_checkin.database import Base


class ScanRun(Base):
    __tablename__ = "scan_runs"
    __table_args__ = (
        UniqueConstraint("job", "period_key", name="uq_scan_runs_job_period"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    job = Column(String(50), nullable=False)
    period_key = Column(String(20), nullable=False)  # YYYY-MM-DD or YYYY-MM-DDTHH, UTC
    claimed_at = Column(DateTime(timezone=True), server_default=func.now())
