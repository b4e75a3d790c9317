"""FastAPI application entry point."""
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from daily_checkin.config import settings
from daily_checkin.database import Base, SessionLocal, engine
from daily_checkin.scheduler import RunGuard, ScanScheduler
from daily_checkin.services.clock import Clock
from daily_checkin.services.email_service import EmailSender

# Import routers
from daily_checkin.routers import admin, auth, check_ins, contacts, email, reminders

# Import all models so Base.metadata knows about them
from daily_checkin.models.user import User                  # noqa: F401
from daily_checkin.models.contact import EmergencyContact   # noqa: F401
from daily_checkin.models.check_in import CheckIn           # noqa: F401
from daily_checkin.models.scan_run import ScanRun           # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Daily Check-In",
    description="Daily safety check-in with emergency-contact alerts on missed days",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(check_ins.router, prefix="/api/check-ins", tags=["CheckIns"])
app.include_router(contacts.router, prefix="/api/contacts", tags=["Contacts"])
app.include_router(reminders.router, prefix="/api/reminder", tags=["Reminder"])
app.include_router(email.router, prefix="/api/email", tags=["Email"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.exception_handler(OperationalError)
def storage_unavailable(request: Request, exc: OperationalError):
    """The database is unreachable; there is no fallback, so report 503."""
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})


@app.on_event("startup")
def on_startup():
    """Create tables (SQLite dev mode) and wire the long-lived collaborators."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)

    app.state.clock = Clock()
    app.state.email_sender = EmailSender.from_settings(settings)
    if not app.state.email_sender.configured:
        logger.warning("SMTP credentials not set, email sending is disabled")
    app.state.run_guard = RunGuard()
    app.state.scheduler = ScanScheduler(
        session_factory=SessionLocal,
        clock=app.state.clock,
        sender=app.state.email_sender,
        guard=app.state.run_guard,
        daily_hour=settings.MISSED_CHECK_IN_SCAN_HOUR,
        poll_seconds=settings.SCHEDULER_POLL_SECONDS,
        send_delay=settings.EMAIL_SEND_DELAY_SECONDS,
    )
    if settings.SCHEDULER_ENABLED:
        app.state.scheduler.start()


@app.on_event("shutdown")
def on_shutdown():
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None and scheduler.running:
        scheduler.stop()


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
