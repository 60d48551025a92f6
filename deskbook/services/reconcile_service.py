"""
Presence transition reconciler

Leaving OFFICE would orphan a day's desk and parking reservations. Nothing is
cancelled silently: callers first get the list of affected reservations and
only a confirmed request deletes them before the presence is changed.
"""
import logging
from datetime import date
from typing import Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from deskbook.models.presence import PresenceMode
from deskbook.services.ledger import DESK_LEDGER, PARKING_LEDGER, ReservationLedger
from deskbook.services.presence_service import PresenceService
from deskbook.utils.exceptions import ConflictException, PartialApplicationException, PastDateException

logger = logging.getLogger(__name__)


def _slot(reservation):
    if reservation is None:
        return None
    return {"id": reservation.id, "code": reservation.resource.code}


class ReconcileService:
    """Confirm-before-cascade workflows for presence downgrades"""

    @staticmethod
    def my_daily(db: Session, user_id: int, day: date) -> dict:
        """The user's desk and parking reservation for one day"""
        return {
            "desk": _slot(ReservationLedger.find_by_user(db, DESK_LEDGER, user_id, day)),
            "parking": _slot(ReservationLedger.find_by_user(db, PARKING_LEDGER, user_id, day)),
        }

    @staticmethod
    def cancel_daily(db: Session, user_id: int, day: date) -> dict:
        """Delete both of the user's reservations for a day in one transaction"""
        deleted = {"deleted_desks": [], "deleted_parking": []}
        try:
            for ledger, key in ((DESK_LEDGER, "deleted_desks"), (PARKING_LEDGER, "deleted_parking")):
                reservation = ReservationLedger.find_by_user(db, ledger, user_id, day)
                if reservation:
                    deleted[key].append(reservation.resource.code)
                    db.delete(reservation)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        if deleted["deleted_desks"] or deleted["deleted_parking"]:
            logger.info("cleared reservations of user %s on %s: %s", user_id, day, deleted)
        return deleted

    @staticmethod
    def transition_day(db: Session, user_id: int, day: date, mode: PresenceMode,
                       confirm: bool, today: date) -> dict:
        """
        Single-day presence change.

        When the day is currently OFFICE, the target is not, and reservations
        exist, an unconfirmed request returns them with ``applied=False`` and
        changes nothing. A confirmed request deletes them and then sets the
        presence.
        """
        if day < today:
            raise PastDateException("Cannot change presence for a day in the past")

        current = PresenceService.get_mode(db, user_id, day)
        held = ReconcileService.my_daily(db, user_id, day)
        downgrade = current == PresenceMode.OFFICE and mode != PresenceMode.OFFICE
        has_reservations = held["desk"] is not None or held["parking"] is not None

        cancelled = {"deleted_desks": [], "deleted_parking": []}
        if downgrade and has_reservations:
            if not confirm:
                return {
                    "date": day.isoformat(),
                    "mode": current.value,
                    "applied": False,
                    "requires_confirmation": True,
                    "reservations": held,
                    "cancelled": cancelled,
                }
            cancelled = ReconcileService.cancel_daily(db, user_id, day)

        presence = PresenceService.set_presence(db, user_id, day, mode, today)
        return {
            "date": day.isoformat(),
            "mode": presence.mode.value,
            "applied": True,
            "requires_confirmation": False,
            "reservations": ReconcileService.my_daily(db, user_id, day),
            "cancelled": cancelled,
        }

    @staticmethod
    def check_bulk(db: Session, user_id: int, days: Sequence[date]) -> List[Dict]:
        """Per date, the desk and parking codes the user holds (dates without any are omitted)"""
        by_date: Dict[str, Dict] = {}
        for ledger, key in ((DESK_LEDGER, "desk_code"), (PARKING_LEDGER, "parking_code")):
            for reservation in ReservationLedger.list_for_user_on(db, ledger, user_id, days):
                entry = by_date.setdefault(
                    reservation.date.isoformat(),
                    {"desk_code": None, "parking_code": None},
                )
                entry[key] = reservation.resource.code
        return [{"date": d, **by_date[d]} for d in sorted(by_date)]

    @staticmethod
    def delete_bulk(db: Session, user_id: int, days: Sequence[date]) -> Dict[str, int]:
        """Delete the user's desk and parking reservations on exactly these dates, atomically"""
        try:
            deleted_desks = ReservationLedger.delete_for_user_on(db, DESK_LEDGER, user_id, days)
            deleted_parking = ReservationLedger.delete_for_user_on(db, PARKING_LEDGER, user_id, days)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info("bulk-deleted %d desk and %d parking reservations of user %s",
                    deleted_desks, deleted_parking, user_id)
        return {"deleted_desks": deleted_desks, "deleted_parking": deleted_parking}

    @staticmethod
    def apply_bulk(db: Session, user_id: int, days: Sequence[date], mode: PresenceMode,
                   confirm: bool, today: date) -> dict:
        """
        Monthly-schedule presence change over many dates.

        Validation rejects the whole selection before anything is read or
        written. Then, for a non-OFFICE target, existing reservations either
        stop the request (unconfirmed) or are deleted in a first transaction;
        presence is upserted in a second. A failure in the second phase after
        the first committed is reported as a partial application.
        """
        days = PresenceService.validate_bulk_days(days, today)

        conflicts: List[Dict] = []
        if mode != PresenceMode.OFFICE:
            conflicts = ReconcileService.check_bulk(db, user_id, days)

        if conflicts and not confirm:
            return {
                "applied": False,
                "requires_confirmation": True,
                "conflicts": conflicts,
                "updated": 0,
                "dates": [d.isoformat() for d in days],
                "deleted": {"deleted_desks": 0, "deleted_parking": 0},
            }

        deleted = {"deleted_desks": 0, "deleted_parking": 0}
        if conflicts:
            affected = [date.fromisoformat(c["date"]) for c in conflicts]
            deleted = ReconcileService.delete_bulk(db, user_id, affected)

        try:
            PresenceService.set_presence_bulk(db, user_id, days, mode, today)
        except (SQLAlchemyError, ConflictException):
            if conflicts:
                logger.exception("presence update failed after reservations of user %s were deleted", user_id)
                raise PartialApplicationException(deleted)
            raise

        return {
            "applied": True,
            "requires_confirmation": False,
            "conflicts": conflicts,
            "updated": len(days),
            "dates": [d.isoformat() for d in days],
            "deleted": deleted,
        }
