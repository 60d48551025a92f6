from datetime import date, timedelta

import pytest

from conftest import TODAY
from deskbook.models.presence import PresenceMode
from deskbook.models.reservation import DeskReservation, ParkingReservation
from deskbook.models.user import UserRole
from deskbook.services.booking_service import BookingService
from deskbook.services.ledger import DESK_LEDGER, PARKING_LEDGER, ReservationLedger
from deskbook.utils.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    PastDateException,
    PresenceRequiredException,
    ResourceAlreadyBookedException,
    ResourceUnavailableException,
    UserAlreadyBookedException,
)

DAY = date(2026, 2, 10)


def test_reserve_requires_office_presence(test_db_session, make_user, make_desk):
    user = make_user()
    desk = make_desk()
    with pytest.raises(PresenceRequiredException):
        BookingService.reserve(test_db_session, DESK_LEDGER, user.id, desk.id, DAY, TODAY)


@pytest.mark.parametrize("mode", [PresenceMode.HOME, PresenceMode.ABSENT])
def test_reserve_rejects_non_office_presence(test_db_session, make_user, make_desk, set_presence, mode):
    user = make_user()
    desk = make_desk()
    set_presence(user, DAY, mode)
    with pytest.raises(PresenceRequiredException):
        BookingService.reserve(test_db_session, DESK_LEDGER, user.id, desk.id, DAY, TODAY)


def test_reserve_rejects_past_date(test_db_session, make_user, make_desk, set_presence):
    user = make_user()
    desk = make_desk()
    yesterday = TODAY - timedelta(days=1)
    set_presence(user, yesterday)
    with pytest.raises(PastDateException):
        BookingService.reserve(test_db_session, DESK_LEDGER, user.id, desk.id, yesterday, TODAY)


def test_reserve_today_succeeds(test_db_session, make_user, make_desk, set_presence):
    user = make_user()
    desk = make_desk()
    set_presence(user, TODAY)
    reservation = BookingService.reserve(test_db_session, DESK_LEDGER, user.id, desk.id, TODAY, TODAY)
    assert reservation.date == TODAY
    assert reservation.resource.code == "A-01"


def test_reserve_rejects_inactive_or_missing_resource(test_db_session, make_user, make_desk, set_presence):
    user = make_user()
    inactive = make_desk(code="X-01", is_active=False)
    set_presence(user, DAY)
    with pytest.raises(ResourceUnavailableException):
        BookingService.reserve(test_db_session, DESK_LEDGER, user.id, inactive.id, DAY, TODAY)
    with pytest.raises(ResourceUnavailableException):
        BookingService.reserve(test_db_session, DESK_LEDGER, user.id, 9999, DAY, TODAY)


def test_resource_and_user_conflicts_are_distinguished(test_db_session, make_user, make_desk, set_presence):
    first, second = make_user(), make_user()
    a01, o01 = make_desk(code="A-01"), make_desk(code="O-01")
    set_presence(first, DAY)
    set_presence(second, DAY)

    BookingService.reserve(test_db_session, DESK_LEDGER, first.id, a01.id, DAY, TODAY)

    with pytest.raises(ResourceAlreadyBookedException):
        BookingService.reserve(test_db_session, DESK_LEDGER, second.id, a01.id, DAY, TODAY)
    with pytest.raises(UserAlreadyBookedException):
        BookingService.reserve(test_db_session, DESK_LEDGER, first.id, o01.id, DAY, TODAY)

    assert test_db_session.query(DeskReservation).count() == 1


def test_desk_and_parking_ledgers_are_independent(test_db_session, make_user, make_desk, make_spot,
                                                  set_presence):
    user = make_user()
    desk, spot = make_desk(), make_spot()
    set_presence(user, DAY)

    BookingService.reserve(test_db_session, DESK_LEDGER, user.id, desk.id, DAY, TODAY)
    parking = BookingService.reserve(test_db_session, PARKING_LEDGER, user.id, spot.id, DAY, TODAY)

    assert parking.resource.code == "P-01"
    assert test_db_session.query(ParkingReservation).count() == 1


def test_constraint_violation_translated_when_precheck_misses(test_db_session, make_user, make_desk,
                                                              set_presence, monkeypatch):
    """A racing writer that slipped past the pre-check still gets a typed conflict"""
    first, second = make_user(), make_user()
    a01, o01 = make_desk(code="A-01"), make_desk(code="O-01")
    set_presence(first, DAY)
    set_presence(second, DAY)
    BookingService.reserve(test_db_session, DESK_LEDGER, first.id, a01.id, DAY, TODAY)

    monkeypatch.setattr(ReservationLedger, "find_by_resource", staticmethod(lambda *a: None))
    monkeypatch.setattr(ReservationLedger, "find_by_user", staticmethod(lambda *a: None))

    with pytest.raises(ResourceAlreadyBookedException):
        BookingService.reserve(test_db_session, DESK_LEDGER, second.id, a01.id, DAY, TODAY)
    with pytest.raises(UserAlreadyBookedException):
        BookingService.reserve(test_db_session, DESK_LEDGER, first.id, o01.id, DAY, TODAY)

    assert test_db_session.query(DeskReservation).count() == 1


def test_unknown_unique_violation_maps_to_conflict():
    from sqlalchemy.exc import IntegrityError
    from deskbook.services.ledger import translate_integrity_error

    exc = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: something.else"))
    assert isinstance(translate_integrity_error(DESK_LEDGER, exc), ConflictException)

    postgres = IntegrityError(
        "INSERT ...", {},
        Exception('duplicate key value violates unique constraint "uq_parking_reservation_user_date"'),
    )
    assert isinstance(translate_integrity_error(PARKING_LEDGER, postgres), UserAlreadyBookedException)

    not_unique = IntegrityError("INSERT ...", {}, Exception("NOT NULL constraint failed: reservations.date"))
    assert translate_integrity_error(DESK_LEDGER, not_unique) is None


def test_cancel_twice_returns_not_found(test_db_session, make_user, make_desk, set_presence):
    user = make_user()
    desk = make_desk()
    set_presence(user, DAY)
    reservation = BookingService.reserve(test_db_session, DESK_LEDGER, user.id, desk.id, DAY, TODAY)
    reservation_id = reservation.id

    BookingService.cancel(test_db_session, DESK_LEDGER, reservation_id, user)
    with pytest.raises(NotFoundException):
        BookingService.cancel(test_db_session, DESK_LEDGER, reservation_id, user)


def test_cancel_by_other_user_forbidden_but_admin_allowed(test_db_session, make_user, make_desk, set_presence):
    owner, other = make_user(), make_user()
    admin = make_user(role=UserRole.ADMIN)
    desk = make_desk()
    set_presence(owner, DAY)
    reservation = BookingService.reserve(test_db_session, DESK_LEDGER, owner.id, desk.id, DAY, TODAY)

    with pytest.raises(ForbiddenException):
        BookingService.cancel(test_db_session, DESK_LEDGER, reservation.id, other)

    BookingService.cancel(test_db_session, DESK_LEDGER, reservation.id, admin)
    assert test_db_session.query(DeskReservation).count() == 0


def test_past_reservation_can_be_cancelled(test_db_session, make_user, make_desk):
    user = make_user()
    desk = make_desk()
    past = DeskReservation(user_id=user.id, resource_id=desk.id, date=TODAY - timedelta(days=30))
    test_db_session.add(past)
    test_db_session.commit()

    BookingService.cancel(test_db_session, DESK_LEDGER, past.id, user)
    assert test_db_session.query(DeskReservation).count() == 0
