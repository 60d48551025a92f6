"""
Booking engine
Creates and cancels desk/parking reservations against one ledger
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from deskbook.models.presence import Presence, PresenceMode
from deskbook.models.user import User
from deskbook.services.ledger import Ledger, ReservationLedger, translate_integrity_error
from deskbook.utils.exceptions import (
    ForbiddenException,
    NotFoundException,
    PastDateException,
    PresenceRequiredException,
    ResourceAlreadyBookedException,
    ResourceUnavailableException,
    UserAlreadyBookedException,
)

logger = logging.getLogger(__name__)


def _display_name(ledger: Ledger, resource) -> str:
    if ledger.has_location_label and resource.location_label:
        return resource.location_label
    return resource.name


class BookingService:
    """Reservation engine shared by the desk and parking ledgers"""

    @staticmethod
    def _get_bookable_resource(db: Session, ledger: Ledger, resource_id: int):
        model = ledger.resource_model
        resource = db.query(model).filter(model.id == resource_id).first()
        if not resource or not resource.is_active:
            raise ResourceUnavailableException(
                f"{ledger.label} does not exist or is inactive"
            )
        return resource

    @staticmethod
    def reserve(db: Session, ledger: Ledger, user_id: int, resource_id: int, day: date, today: date):
        """
        Book one resource for one day.

        Order of checks: past date, resource availability, OFFICE presence,
        then the two ledger uniqueness rules. The pre-checks only give a
        precise message in the common case; the unique constraints on the
        reservation table decide races and their violation is translated to
        the same typed errors.
        """
        if day < today:
            raise PastDateException("Cannot book a day in the past")

        resource = BookingService._get_bookable_resource(db, ledger, resource_id)

        presence = db.query(Presence).filter(
            Presence.user_id == user_id,
            Presence.date == day,
        ).first()
        if not presence or presence.mode != PresenceMode.OFFICE:
            raise PresenceRequiredException(
                f"Set your presence to OFFICE on {day.isoformat()} before booking"
            )

        # the session transaction began with the first query above
        if ReservationLedger.find_by_resource(db, ledger, resource_id, day):
            raise ResourceAlreadyBookedException(
                f"{ledger.label} {resource.code} is already booked on {day.isoformat()}"
            )
        if ReservationLedger.find_by_user(db, ledger, user_id, day):
            raise UserAlreadyBookedException(
                f"You already have a {ledger.kind} reservation on {day.isoformat()}"
            )

        reservation = ledger.reservation_model(user_id=user_id, resource_id=resource_id, date=day)
        db.add(reservation)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            error = translate_integrity_error(ledger, exc)
            if error is None:
                raise
            logger.info("%s booking race lost: user=%s resource=%s date=%s (%s)",
                        ledger.kind, user_id, resource_id, day, error.kind)
            raise error
        db.refresh(reservation)
        logger.info("%s %s booked by user %s for %s", ledger.label, resource.code, user_id, day)
        return reservation

    @staticmethod
    def cancel(db: Session, ledger: Ledger, reservation_id: int, requesting_user: User) -> None:
        """Cancel a reservation; owner or admin only, past reservations included"""
        reservation = ReservationLedger.get(db, ledger, reservation_id)
        if not reservation:
            raise NotFoundException(f"Reservation {reservation_id} not found")

        if reservation.user_id != requesting_user.id and not requesting_user.is_admin:
            raise ForbiddenException("You can only cancel your own reservations")

        db.delete(reservation)
        db.commit()
        logger.info("%s reservation %s cancelled by user %s", ledger.kind, reservation_id, requesting_user.id)

    @staticmethod
    def list_mine(db: Session, ledger: Ledger, user_id: int) -> List:
        return ReservationLedger.list_for_user(db, ledger, user_id)

    @staticmethod
    def availability(db: Session, ledger: Ledger, day: date, viewer_id: int) -> List[dict]:
        """Active resources with their booking state for one day"""
        model = ledger.resource_model
        resources = (
            db.query(model)
            .filter(model.is_active.is_(True))
            .order_by(model.code)
            .all()
        )
        booked = {r.resource_id: r for r in ReservationLedger.list_on(db, ledger, day)}

        grid = []
        for resource in resources:
            reservation = booked.get(resource.id)
            grid.append({
                "id": resource.id,
                "code": resource.code,
                "name": resource.name,
                "location_label": resource.location_label if ledger.has_location_label else None,
                "is_reserved": reservation is not None,
                "is_mine": reservation is not None and reservation.user_id == viewer_id,
                "reserved_by": reservation.user.name if reservation else None,
                "reservation_id": reservation.id if reservation else None,
            })
        return grid

    @staticmethod
    def office(db: Session, ledger: Ledger, day: date) -> dict:
        """Occupancy of one day against the active inventory"""
        model = ledger.resource_model
        reservations = sorted(
            ReservationLedger.list_on(db, ledger, day),
            key=lambda r: r.resource.code,
        )
        return {
            "date": day.isoformat(),
            "reserved_count": len(reservations),
            "capacity": db.query(model).filter(model.is_active.is_(True)).count(),
            "people": [
                {"desk_code": r.resource.code, "user_name": r.user.name}
                for r in reservations
            ],
        }

    @staticmethod
    def search(db: Session, ledgers: List[Ledger], date_from: date, date_to: date,
               user_id: Optional[int] = None, search: Optional[str] = None) -> dict:
        """Admin listing across ledgers, newest day first"""
        entries = []
        for ledger in ledgers:
            for r in ReservationLedger.list_between(db, ledger, date_from, date_to, user_id):
                entries.append({
                    "id": r.id,
                    "type": ledger.kind,
                    "date": r.date.isoformat(),
                    "resource_code": r.resource.code,
                    "resource_name": _display_name(ledger, r.resource),
                    "user_id": r.user.id,
                    "user_name": r.user.name,
                    "user_email": r.user.email,
                    "created_at": r.created_at,
                })

        # date descending, then type ascending
        entries.sort(key=lambda e: e["type"])
        entries.sort(key=lambda e: e["date"], reverse=True)

        if search:
            needle = search.lower()
            entries = [
                e for e in entries
                if needle in e["user_name"].lower() or needle in e["resource_code"].lower()
            ]

        return {
            "reservations": entries,
            "total": len(entries),
            "summary": {
                "total_desk": sum(1 for e in entries if e["type"] == "desk"),
                "total_parking": sum(1 for e in entries if e["type"] == "parking"),
            },
        }
