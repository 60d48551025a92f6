"""
Presence ledger service
Daily HOME / OFFICE / ABSENT declarations per user
"""
import logging
from datetime import date
from typing import Dict, List, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from deskbook.config import settings
from deskbook.models.presence import Presence, PresenceMode
from deskbook.models.resource import Desk
from deskbook.models.user import User
from deskbook.services.ledger import DESK_LEDGER, ReservationLedger
from deskbook.utils.dates import is_weekend, month_bounds, unique_days
from deskbook.utils.exceptions import ConflictException, PastDateException, ValidationException

logger = logging.getLogger(__name__)


class PresenceService:
    """Presence ledger"""

    @staticmethod
    def get_mode(db: Session, user_id: int, day: date) -> PresenceMode:
        """Declared mode for a day; HOME when nothing was declared"""
        presence = db.query(Presence).filter(
            Presence.user_id == user_id,
            Presence.date == day,
        ).first()
        return presence.mode if presence else PresenceMode.HOME

    @staticmethod
    def _upsert(db: Session, user_id: int, day: date, mode: PresenceMode) -> Presence:
        presence = db.query(Presence).filter(
            Presence.user_id == user_id,
            Presence.date == day,
        ).first()
        if presence:
            presence.mode = mode
        else:
            presence = Presence(user_id=user_id, date=day, mode=mode)
            db.add(presence)
        return presence

    @staticmethod
    def set_presence(db: Session, user_id: int, day: date, mode: PresenceMode, today: date) -> Presence:
        """
        Upsert the mode for one day.

        Existing reservations are never touched here, even when the mode
        leaves OFFICE; the reconciler handles that behind a confirmation.
        """
        if day < today:
            raise PastDateException("Cannot change presence for a day in the past")

        presence = PresenceService._upsert(db, user_id, day, mode)
        try:
            db.commit()
        except IntegrityError:
            # a concurrent first write for the same day won the unique index
            db.rollback()
            raise ConflictException("Presence for that day was changed concurrently, try again")
        db.refresh(presence)
        logger.info("presence of user %s on %s set to %s", user_id, day, mode.value)
        return presence

    @staticmethod
    def validate_bulk_days(days: Sequence[date], today: date) -> List[date]:
        """All-or-nothing validation of a bulk date selection"""
        if not days:
            raise ValidationException("At least one date is required")
        if len(days) > settings.max_bulk_dates:
            raise ValidationException(
                f"At most {settings.max_bulk_dates} dates can be changed at once"
            )
        for day in days:
            if day < today:
                raise PastDateException(
                    f"Cannot change presence for a day in the past: {day.isoformat()}"
                )
            if is_weekend(day):
                raise ValidationException(
                    f"Cannot set presence on a weekend: {day.isoformat()}"
                )
        return unique_days(days)

    @staticmethod
    def set_presence_bulk(db: Session, user_id: int, days: Sequence[date], mode: PresenceMode,
                          today: date) -> List[date]:
        """Validate every date first, then upsert them all in one transaction"""
        days = PresenceService.validate_bulk_days(days, today)
        try:
            for day in days:
                PresenceService._upsert(db, user_id, day, mode)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictException("Presence for one of the days was changed concurrently, try again")
        except Exception:
            db.rollback()
            raise
        logger.info("presence of user %s set to %s on %d days", user_id, mode.value, len(days))
        return days

    @staticmethod
    def month_entries(db: Session, user_id: int, year: int, month: int) -> Dict[str, str]:
        """Declared modes of one month keyed by YYYY-MM-DD"""
        start, end = month_bounds(year, month)
        presences = db.query(Presence).filter(
            Presence.user_id == user_id,
            Presence.date >= start,
            Presence.date < end,
        ).all()
        return {p.date.isoformat(): p.mode.value for p in presences}

    @staticmethod
    def summary(db: Session, day: date) -> dict:
        """Who is where on a day, with the desk code of those in the office"""
        presences = (
            db.query(Presence)
            .options(joinedload(Presence.user))
            .filter(Presence.date == day)
            .all()
        )
        desk_by_user = {
            r.user_id: r.resource.code
            for r in ReservationLedger.list_on(db, DESK_LEDGER, day)
        }

        office, home, absent = [], [], []
        for p in presences:
            if p.mode == PresenceMode.OFFICE:
                office.append({"name": p.user.name, "desk_code": desk_by_user.get(p.user_id)})
            elif p.mode == PresenceMode.HOME:
                home.append({"name": p.user.name})
            else:
                absent.append({"name": p.user.name})

        for group in (office, home, absent):
            group.sort(key=lambda entry: entry["name"].lower())

        return {
            "date": day.isoformat(),
            "office": office,
            "home": home,
            "absent": absent,
            "counts": {
                "total": db.query(User).count(),
                "total_desks": db.query(Desk).filter(Desk.is_active.is_(True)).count(),
                "office": len(office),
                "home": len(home),
                "absent": len(absent),
            },
        }
