"""Pydantic schemas for accounts and authentication."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")
    password: str = Field(min_length=6, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=100)


class UserOut(BaseModel):
    id: int
    username: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class MeOut(UserOut):
    role: str
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    success: bool = True
    user: UserOut


class MessageResponse(BaseModel):
    success: bool = True
    message: str
