"""Account registration, login and session routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from daily_checkin.config import settings
from daily_checkin.database import get_db
from daily_checkin.dependencies import get_current_user, get_optional_user
from daily_checkin.exceptions import InvalidCredentials, UsernameTaken
from daily_checkin.models.user import User
from daily_checkin.schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MeOut,
    MessageResponse,
    RegisterRequest,
)
from daily_checkin.services.security import create_session_token, hash_password, verify_password

logger = logging.getLogger(__name__)
router = APIRouter()


def _set_session_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=create_session_token(user.id, user.username),
        max_age=settings.SESSION_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        path="/",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    """Create an account and log it in."""
    if db.query(User).filter(User.username == payload.username).first():
        raise UsernameTaken()

    user = User(
        username=payload.username,
        password_hash=hash_password(payload.password),
        email=payload.email,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UsernameTaken()
    db.refresh(user)

    _set_session_cookie(response, user)
    logger.info("Registered user %s (%s)", user.id, user.username)
    return {"success": True, "user": user}


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Validate credentials and set the session cookie."""
    user = db.query(User).filter(User.username == payload.username).first()
    # Same error for unknown user and wrong password
    if not user or not verify_password(payload.password, user.password_hash):
        raise InvalidCredentials()

    _set_session_cookie(response, user)
    logger.info("User %s logged in", user.username)
    return {"success": True, "user": user}


@router.get("/me", response_model=Optional[MeOut])
def me(user: Optional[User] = Depends(get_optional_user)):
    """Current user, or null when not logged in."""
    return user


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.COOKIE_NAME, path="/")
    return {"success": True}


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not verify_password(payload.current_password, user.password_hash):
        raise InvalidCredentials("Current password is incorrect")
    user.password_hash = hash_password(payload.new_password)
    db.commit()
    logger.info("User %s changed password", user.username)
    return {"success": True, "message": "Password updated"}
