"""
Presence API routes
"""
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from deskbook.database import get_db
from deskbook.dependencies import get_current_user, get_today
from deskbook.models.user import User
from deskbook.schemas.common import Day
from deskbook.schemas.presence import (
    PresenceBulkResponse,
    PresenceBulkSet,
    PresenceMonthResponse,
    PresenceResponse,
    PresenceSet,
    PresenceSummaryResponse,
    PresenceTransition,
    PresenceTransitionResponse,
)
from deskbook.services.presence_service import PresenceService
from deskbook.services.reconcile_service import ReconcileService

router = APIRouter(
    prefix="/api/presence",
    tags=["Presence"]
)


@router.get("", response_model=PresenceResponse)
async def get_presence(
        day: Day = Query(..., alias="date"),
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """The caller's mode for a day (HOME when undeclared)"""
    return {"date": day, "mode": PresenceService.get_mode(db, current_user.id, day)}


@router.put("", response_model=PresenceResponse)
async def set_presence(
        presence_data: PresenceSet,
        current_user: User = Depends(get_current_user),
        today: date = Depends(get_today),
        db: Session = Depends(get_db)
):
    """
    Set the mode for a day.
    - reservations are left as they are; use /transition to clear them
    """
    presence = PresenceService.set_presence(db, current_user.id, presence_data.date, presence_data.mode, today)
    return {"date": presence.date, "mode": presence.mode}


@router.post("/transition", response_model=PresenceTransitionResponse)
async def transition_presence(
        body: PresenceTransition,
        current_user: User = Depends(get_current_user),
        today: date = Depends(get_today),
        db: Session = Depends(get_db)
):
    """
    Change the mode for a day, reconciling reservations.
    - leaving OFFICE with reservations requires confirm=true
    """
    return ReconcileService.transition_day(db, current_user.id, body.date, body.mode, body.confirm, today)


@router.post("/bulk", response_model=PresenceBulkResponse)
async def bulk_presence(
        body: PresenceBulkSet,
        current_user: User = Depends(get_current_user),
        today: date = Depends(get_today),
        db: Session = Depends(get_db)
):
    """
    Set the mode on many weekdays at once.
    - any past or weekend date rejects the whole request
    - leaving OFFICE with reservations requires confirm=true
    """
    return ReconcileService.apply_bulk(db, current_user.id, body.dates, body.mode, body.confirm, today)


@router.get("/month", response_model=PresenceMonthResponse)
async def month_presence(
        year: int = Query(..., ge=2020, le=2100),
        month: int = Query(..., ge=1, le=12),
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Declared modes of one month"""
    return {"entries": PresenceService.month_entries(db, current_user.id, year, month)}


@router.get("/summary", response_model=PresenceSummaryResponse)
async def presence_summary(
        day: Day = Query(..., alias="date"),
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Everyone's declared mode for a day"""
    return PresenceService.summary(db, day)
