"""User ORM model — accounts plus reminder preferences."""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from daily_checkin.database import Base


class UserRole(str, enum.Enum):
    user = "user"
    admin = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.user)
    reminder_enabled = Column(Boolean, nullable=False, default=False)
    reminder_email = Column(String(255), nullable=True)
    reminder_hour = Column(Integer, nullable=False, default=8)  # 0-23, UTC
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    contacts = relationship(
        "EmergencyContact",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="EmergencyContact.id",
    )
    check_ins = relationship(
        "CheckIn",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
