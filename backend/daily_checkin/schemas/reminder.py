"""Pydantic schemas for reminder settings, test email and scan results."""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class ReminderSettings(BaseModel):
    reminder_enabled: bool
    reminder_email: Optional[str] = None
    reminder_hour: int

    model_config = {"from_attributes": True}


class ReminderSettingsUpdate(BaseModel):
    reminder_enabled: bool
    reminder_email: Optional[EmailStr] = None
    reminder_hour: int = Field(default=8, ge=0, le=23)

    @field_validator("reminder_email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ReminderSettingsResponse(BaseModel):
    success: bool = True
    message: str
    settings: ReminderSettings


class SendTestEmailRequest(BaseModel):
    email: EmailStr


class ScanResultOut(BaseModel):
    job: str
    recipients: int
    sent: int
    failed: int
