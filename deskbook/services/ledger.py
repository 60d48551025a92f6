"""
Exclusive daily slot ledger

A ``Ledger`` describes one resource kind (desk or parking): which table holds
the inventory, which table holds the reservations and the names of the two
uniqueness constraints guarding ``(resource, date)`` and ``(user, date)``.
``ReservationLedger`` holds the queries shared by every service that reads or
clears reservations.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from deskbook.models.resource import Desk, ParkingSpot
from deskbook.models.reservation import DeskReservation, ParkingReservation
from deskbook.utils.exceptions import (
    AppException,
    ConflictException,
    ResourceAlreadyBookedException,
    UserAlreadyBookedException,
)


@dataclass(frozen=True)
class Ledger:
    kind: str
    label: str
    resource_model: Type
    reservation_model: Type
    resource_column: str
    resource_constraint: str
    user_constraint: str
    has_location_label: bool = False

    @property
    def table(self) -> str:
        return self.reservation_model.__tablename__


DESK_LEDGER = Ledger(
    kind="desk",
    label="Desk",
    resource_model=Desk,
    reservation_model=DeskReservation,
    resource_column="desk_id",
    resource_constraint="uq_reservation_desk_date",
    user_constraint="uq_reservation_user_date",
    has_location_label=True,
)

PARKING_LEDGER = Ledger(
    kind="parking",
    label="Parking spot",
    resource_model=ParkingSpot,
    reservation_model=ParkingReservation,
    resource_column="spot_id",
    resource_constraint="uq_parking_reservation_spot_date",
    user_constraint="uq_parking_reservation_user_date",
)

LEDGERS = {ledger.kind: ledger for ledger in (DESK_LEDGER, PARKING_LEDGER)}


def is_unique_violation(exc: IntegrityError) -> bool:
    lowered = str(exc.orig).lower()
    return "unique" in lowered or "duplicate" in lowered


def translate_integrity_error(ledger: Ledger, exc: IntegrityError) -> Optional[AppException]:
    """
    Map a uniqueness violation raised by the reservation table to a typed error.

    sqlite reports the violated columns (``UNIQUE constraint failed:
    reservations.desk_id, reservations.date``), PostgreSQL and MySQL report the
    constraint name. Returns None when the error is not a uniqueness violation.
    """
    if not is_unique_violation(exc):
        return None
    message = str(exc.orig)

    if ledger.resource_constraint in message or f"{ledger.table}.{ledger.resource_column}" in message:
        return ResourceAlreadyBookedException(
            f"{ledger.label} is already booked for that day"
        )
    if ledger.user_constraint in message or f"{ledger.table}.user_id" in message:
        return UserAlreadyBookedException(
            f"You already have a {ledger.kind} reservation for that day"
        )
    return ConflictException()


class ReservationLedger:
    """Queries over one reservation table"""

    @staticmethod
    def get(db: Session, ledger: Ledger, reservation_id: int):
        model = ledger.reservation_model
        return db.query(model).filter(model.id == reservation_id).first()

    @staticmethod
    def find_by_resource(db: Session, ledger: Ledger, resource_id: int, day: date):
        model = ledger.reservation_model
        return db.query(model).filter(
            model.resource_id == resource_id,
            model.date == day,
        ).first()

    @staticmethod
    def find_by_user(db: Session, ledger: Ledger, user_id: int, day: date):
        model = ledger.reservation_model
        return (
            db.query(model)
            .options(joinedload(model.resource))
            .filter(model.user_id == user_id, model.date == day)
            .first()
        )

    @staticmethod
    def list_for_user(db: Session, ledger: Ledger, user_id: int) -> List:
        model = ledger.reservation_model
        return (
            db.query(model)
            .options(joinedload(model.resource))
            .filter(model.user_id == user_id)
            .order_by(model.date)
            .all()
        )

    @staticmethod
    def list_for_user_on(db: Session, ledger: Ledger, user_id: int, days: Iterable[date]) -> List:
        model = ledger.reservation_model
        return (
            db.query(model)
            .options(joinedload(model.resource))
            .filter(model.user_id == user_id, model.date.in_(list(days)))
            .order_by(model.date)
            .all()
        )

    @staticmethod
    def list_on(db: Session, ledger: Ledger, day: date) -> List:
        model = ledger.reservation_model
        return (
            db.query(model)
            .options(joinedload(model.resource), joinedload(model.user))
            .filter(model.date == day)
            .all()
        )

    @staticmethod
    def list_between(db: Session, ledger: Ledger, date_from: date, date_to: date,
                     user_id: Optional[int] = None) -> List:
        model = ledger.reservation_model
        query = (
            db.query(model)
            .options(joinedload(model.resource), joinedload(model.user))
            .filter(model.date >= date_from, model.date <= date_to)
        )
        if user_id is not None:
            query = query.filter(model.user_id == user_id)
        return query.order_by(model.date.desc()).all()

    @staticmethod
    def delete_for_user_on(db: Session, ledger: Ledger, user_id: int, days: Iterable[date]) -> int:
        """Bulk delete without committing; caller owns the transaction"""
        model = ledger.reservation_model
        return (
            db.query(model)
            .filter(model.user_id == user_id, model.date.in_(list(days)))
            .delete(synchronize_session=False)
        )

    @staticmethod
    def count_future_for_resource(db: Session, ledger: Ledger, resource_id: int, today: date) -> int:
        model = ledger.reservation_model
        return db.query(model).filter(
            model.resource_id == resource_id,
            model.date >= today,
        ).count()

    @staticmethod
    def count_future_for_user(db: Session, ledger: Ledger, user_id: int, today: date) -> int:
        model = ledger.reservation_model
        return db.query(model).filter(
            model.user_id == user_id,
            model.date >= today,
        ).count()

    @staticmethod
    def count_for_resource(db: Session, ledger: Ledger, resource_id: int) -> int:
        model = ledger.reservation_model
        return db.query(model).filter(model.resource_id == resource_id).count()

    @staticmethod
    def count_for_user(db: Session, ledger: Ledger, user_id: int) -> int:
        model = ledger.reservation_model
        return db.query(model).filter(model.user_id == user_id).count()
