"""
Daily reconciliation API routes
Reservation lookups and clean-up used before leaving OFFICE
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from deskbook.database import get_db
from deskbook.dependencies import get_current_user
from deskbook.models.user import User
from deskbook.schemas.common import Day
from deskbook.schemas.reservation import (
    BulkDates,
    BulkDeleteResponse,
    CheckBulkResponse,
    DailyCancelResponse,
    DailyReservations,
    OfficeResponse,
)
from deskbook.services.booking_service import BookingService
from deskbook.services.ledger import DESK_LEDGER
from deskbook.services.reconcile_service import ReconcileService

router = APIRouter(tags=["Reconciliation"])


@router.get("/api/reservations/my-daily", response_model=DailyReservations)
async def get_my_daily(
        day: Day = Query(..., alias="date"),
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """The caller's desk and parking reservation for a day"""
    return ReconcileService.my_daily(db, current_user.id, day)


@router.delete("/api/reservations/my-daily", response_model=DailyCancelResponse)
async def delete_my_daily(
        day: Day = Query(..., alias="date"),
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Cancel both of the caller's reservations for a day at once"""
    return ReconcileService.cancel_daily(db, current_user.id, day)


@router.post("/api/reservations/check-bulk", response_model=CheckBulkResponse)
async def check_bulk(
        body: BulkDates,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Reservations the caller holds on any of the given dates"""
    return {"reservations": ReconcileService.check_bulk(db, current_user.id, body.dates)}


@router.delete("/api/reservations/bulk-daily", response_model=BulkDeleteResponse)
async def delete_bulk_daily(
        body: BulkDates,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Cancel every desk and parking reservation of the caller on the given dates"""
    return ReconcileService.delete_bulk(db, current_user.id, body.dates)


@router.get("/api/office", response_model=OfficeResponse)
async def office_occupancy(
        day: Day = Query(..., alias="date"),
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Who sits where on a day"""
    return BookingService.office(db, DESK_LEDGER, day)
