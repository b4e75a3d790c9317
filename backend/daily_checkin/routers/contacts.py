"""Emergency contact routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from daily_checkin.database import get_db
from daily_checkin.dependencies import get_current_user
from daily_checkin.models.contact import MAX_CONTACTS
from daily_checkin.models.user import User
from daily_checkin.schemas.contact import ContactCreate, ContactCreated, ContactList
from daily_checkin.services import contact_service

router = APIRouter()


@router.get("/", response_model=ContactList)
def list_contacts(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    contacts = contact_service.list_contacts(db, user.id)
    return {
        "contacts": contacts,
        "max_contacts": MAX_CONTACTS,
        "can_add_more": len(contacts) < MAX_CONTACTS,
    }


@router.post("/", response_model=ContactCreated, status_code=status.HTTP_201_CREATED)
def add_contact(payload: ContactCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Add an emergency contact (max three per user)."""
    contact = contact_service.add_contact(db, user.id, name=payload.name, email=payload.email)
    return {"success": True, "contact": contact}


@router.delete("/{contact_id}")
def delete_contact(contact_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    contact_service.delete_contact(db, user.id, contact_id)
    return {"success": True}
