"""Pydantic schemas for emergency contacts."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class ContactCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr


class ContactOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ContactList(BaseModel):
    contacts: list[ContactOut]
    max_contacts: int
    can_add_more: bool


class ContactCreated(BaseModel):
    success: bool = True
    contact: ContactOut
