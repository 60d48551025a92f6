"""
Daily presence model (database table)
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from deskbook.database import Base


class PresenceMode(str, enum.Enum):
    """Declared presence for one day; no record means HOME"""
    HOME = "HOME"
    OFFICE = "OFFICE"
    ABSENT = "ABSENT"


class Presence(Base):
    """Presence table, one row per user per day"""
    __tablename__ = "presences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    mode = Column(SQLEnum(PresenceMode), nullable=False, default=PresenceMode.HOME)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="presences")

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_presence_user_date"),
    )

    def __repr__(self):
        return f"<Presence(user_id={self.user_id}, date={self.date}, mode={self.mode})>"
