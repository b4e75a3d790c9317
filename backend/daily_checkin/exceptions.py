"""Named error kinds surfaced to API clients.

Each one is an ``HTTPException`` with a fixed status code so services can
raise them directly, the same way they raise plain ``HTTPException``.
"""
from fastapi import HTTPException, status

from daily_checkin.models.contact import MAX_CONTACTS


class AlreadyCheckedIn(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="Already checked in today")


class ContactLimitReached(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {MAX_CONTACTS} emergency contacts allowed",
        )


class DuplicateContact(HTTPException):
    def __init__(self, email: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{email} is already one of your emergency contacts",
        )


class UsernameTaken(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail="Username is already taken")


class InvalidCredentials(HTTPException):
    def __init__(self, detail: str = "Invalid username or password"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class NotAuthenticated(HTTPException):
    def __init__(self, detail: str = "Please log in first"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class InsufficientRole(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")


class NotFound(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ReminderEmailRequired(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A reminder email is required when reminders are enabled",
        )


class JobAlreadyRunning(HTTPException):
    def __init__(self, job: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=f"Job '{job}' is already running")
