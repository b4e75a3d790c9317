"""CheckIn ORM model — one immutable row per (user, UTC calendar day)."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from daily_checkin.database import Base


class CheckIn(Base):
    __tablename__ = "check_ins"
    __table_args__ = (
        UniqueConstraint("user_id", "check_in_date", name="uq_check_ins_user_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    check_in_date = Column(String(10), nullable=False)  # YYYY-MM-DD, UTC
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="check_ins")
