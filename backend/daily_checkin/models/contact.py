"""EmergencyContact ORM model — at most three per user, unique email per user."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from daily_checkin.database import Base

MAX_CONTACTS = 3


class EmergencyContact(Base):
    __tablename__ = "emergency_contacts"
    __table_args__ = (
        UniqueConstraint("user_id", "email", name="uq_emergency_contacts_user_email"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="contacts")
