"""
Desk and parking reservation API routes

Both ledgers expose the same endpoints; ``build_ledger_router`` creates them
for one ledger under its own prefixes.
"""
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from deskbook.database import get_db
from deskbook.dependencies import get_current_user, get_today
from deskbook.models.user import User
from deskbook.schemas.common import Day
from deskbook.schemas.reservation import ReservationCreate, ReservationResponse
from deskbook.schemas.resource import ResourceSlotResponse
from deskbook.services.booking_service import BookingService
from deskbook.services.ledger import DESK_LEDGER, PARKING_LEDGER, Ledger


def build_ledger_router(ledger: Ledger, grid_path: str, reservations_path: str, tag: str) -> APIRouter:
    router = APIRouter(tags=[tag])

    @router.get(grid_path, response_model=List[ResourceSlotResponse])
    async def list_resources_for_day(
            day: Day = Query(..., alias="date"),
            current_user: User = Depends(get_current_user),
            db: Session = Depends(get_db)
    ):
        """Active resources and who holds them on a day"""
        return BookingService.availability(db, ledger, day, current_user.id)

    @router.post(reservations_path, response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
    async def create_reservation(
            reservation_data: ReservationCreate,
            current_user: User = Depends(get_current_user),
            today: date = Depends(get_today),
            db: Session = Depends(get_db)
    ):
        """Book a resource for a day (requires OFFICE presence)"""
        return BookingService.reserve(
            db, ledger, current_user.id, reservation_data.resource_id, reservation_data.date, today
        )

    @router.get(reservations_path + "/mine", response_model=List[ReservationResponse])
    async def list_my_reservations(
            current_user: User = Depends(get_current_user),
            db: Session = Depends(get_db)
    ):
        """The caller's reservations ordered by date"""
        return BookingService.list_mine(db, ledger, current_user.id)

    @router.delete(reservations_path + "/{reservation_id}")
    async def cancel_reservation(
            reservation_id: int,
            current_user: User = Depends(get_current_user),
            db: Session = Depends(get_db)
    ):
        """Cancel a reservation (owner or admin)"""
        BookingService.cancel(db, ledger, reservation_id, current_user)
        return {"message": "Reservation cancelled"}

    return router


desk_router = build_ledger_router(DESK_LEDGER, "/api/desks", "/api/reservations", "Desks")
parking_router = build_ledger_router(PARKING_LEDGER, "/api/parking", "/api/parking/reservations", "Parking")
