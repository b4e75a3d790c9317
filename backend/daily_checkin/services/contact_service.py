"""Emergency contact store — bounded list of contacts per user."""
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from daily_checkin.exceptions import ContactLimitReached, DuplicateContact, NotFound
from daily_checkin.models.contact import MAX_CONTACTS, EmergencyContact
from daily_checkin.models.user import User

logger = logging.getLogger(__name__)


def list_contacts(db: Session, user_id: int) -> list[EmergencyContact]:
    return (
        db.query(EmergencyContact)
        .filter(EmergencyContact.user_id == user_id)
        .order_by(EmergencyContact.id)
        .all()
    )


def count_contacts(db: Session, user_id: int) -> int:
    return db.query(func.count(EmergencyContact.id)).filter(EmergencyContact.user_id == user_id).scalar()


def add_contact(db: Session, user_id: int, name: str, email: str) -> EmergencyContact:
    """Add a contact, enforcing the per-user limit and unique email.

    The owner's row is locked for the transaction (a no-op on SQLite, where
    writers are already serialized) and the count is taken again after the
    insert, so concurrent adds cannot push a user past MAX_CONTACTS.
    """
    db.query(User.id).filter(User.id == user_id).with_for_update().first()
    if count_contacts(db, user_id) >= MAX_CONTACTS:
        raise ContactLimitReached()

    existing = (
        db.query(EmergencyContact)
        .filter(EmergencyContact.user_id == user_id, EmergencyContact.email == email)
        .first()
    )
    if existing:
        raise DuplicateContact(email)

    contact = EmergencyContact(user_id=user_id, name=name, email=email)
    db.add(contact)
    try:
        db.flush()
        if count_contacts(db, user_id) > MAX_CONTACTS:
            db.rollback()
            logger.info("User %s lost a race for the last contact slot", user_id)
            raise ContactLimitReached()
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateContact(email)
    db.refresh(contact)
    logger.info("User %s added emergency contact %s (%s)", user_id, contact.id, email)
    return contact


def delete_contact(db: Session, user_id: int, contact_id: int) -> None:
    """Delete one of the user's contacts. Another user's contact looks the same as a missing one."""
    contact = (
        db.query(EmergencyContact)
        .filter(EmergencyContact.id == contact_id, EmergencyContact.user_id == user_id)
        .first()
    )
    if not contact:
        raise NotFound("Contact not found")
    db.delete(contact)
    db.commit()
    logger.info("User %s deleted emergency contact %s", user_id, contact_id)
