"""
Bookable inventory models (database tables)
"""
from sqlalchemy import Boolean, Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from deskbook.database import Base


class Desk(Base):
    """Desks table"""
    __tablename__ = "desks"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(10), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    location_label = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    reservations = relationship("DeskReservation", back_populates="resource")

    def __repr__(self):
        return f"<Desk(id={self.id}, code={self.code}, active={self.is_active})>"


class ParkingSpot(Base):
    """Parking spots table"""
    __tablename__ = "parking_spots"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(10), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    reservations = relationship("ParkingReservation", back_populates="resource")

    def __repr__(self):
        return f"<ParkingSpot(id={self.id}, code={self.code}, active={self.is_active})>"
