"""
Reservation ledger models (database tables)

Desk and parking reservations share one shape. The foreign key column keeps
its natural name in each table (``desk_id`` / ``spot_id``) but is mapped to
the ``resource_id`` attribute so booking code can treat both ledgers alike.
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from deskbook.database import Base


class DeskReservation(Base):
    """Desk reservations table"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    resource_id = Column("desk_id", Integer, ForeignKey("desks.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="desk_reservations")
    resource = relationship("Desk", back_populates="reservations")

    __table_args__ = (
        UniqueConstraint("desk_id", "date", name="uq_reservation_desk_date"),
        UniqueConstraint("user_id", "date", name="uq_reservation_user_date"),
    )

    def __repr__(self):
        return f"<DeskReservation(id={self.id}, desk_id={self.resource_id}, date={self.date})>"


class ParkingReservation(Base):
    """Parking reservations table"""
    __tablename__ = "parking_reservations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    resource_id = Column("spot_id", Integer, ForeignKey("parking_spots.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="parking_reservations")
    resource = relationship("ParkingSpot", back_populates="reservations")

    __table_args__ = (
        UniqueConstraint("spot_id", "date", name="uq_parking_reservation_spot_date"),
        UniqueConstraint("user_id", "date", name="uq_parking_reservation_user_date"),
    )

    def __repr__(self):
        return f"<ParkingReservation(id={self.id}, spot_id={self.resource_id}, date={self.date})>"
