"""Shared FastAPI dependencies: current user, clock, email sender, run guard."""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from daily_checkin.config import settings
from daily_checkin.database import get_db
from daily_checkin.exceptions import InsufficientRole, NotAuthenticated
from daily_checkin.models.user import User, UserRole
from daily_checkin.scheduler import RunGuard
from daily_checkin.services.clock import Clock
from daily_checkin.services.email_service import EmailSender
from daily_checkin.services.security import decode_session_token


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_run_guard(request: Request) -> RunGuard:
    return request.app.state.run_guard


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    """Resolve the session cookie to a User, or None."""
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        return None
    payload = decode_session_token(token)
    if not payload:
        return None
    return db.query(User).filter(User.id == payload["user_id"]).first()


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Like get_optional_user, but a missing or stale session is a 401."""
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        raise NotAuthenticated()
    payload = decode_session_token(token)
    if not payload:
        raise NotAuthenticated("Session expired, please log in again")
    user = db.query(User).filter(User.id == payload["user_id"]).first()
    if not user:
        raise NotAuthenticated("User no longer exists")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.admin:
        raise InsufficientRole()
    return user
