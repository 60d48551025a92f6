"""
Presence Pydantic schemas (API requests/responses)
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from deskbook.models.presence import PresenceMode
from deskbook.schemas.common import Day
from deskbook.schemas.reservation import BulkReservationEntry, DailyReservations, DailyCancelResponse


class PresenceSet(BaseModel):
    """Direct presence upsert"""
    date: Day
    mode: PresenceMode


class PresenceResponse(BaseModel):
    date: Day
    mode: PresenceMode


class PresenceTransition(BaseModel):
    """Single-day change with reservation reconciliation"""
    date: Day
    mode: PresenceMode
    confirm: bool = False


class PresenceTransitionResponse(BaseModel):
    date: Day
    mode: PresenceMode
    applied: bool
    requires_confirmation: bool
    reservations: DailyReservations
    cancelled: DailyCancelResponse


class PresenceBulkSet(BaseModel):
    """Monthly schedule change; 62 dates cover about two months"""
    dates: List[Day] = Field(..., min_length=1, max_length=62)
    mode: PresenceMode
    confirm: bool = False


class BulkDeleted(BaseModel):
    deleted_desks: int
    deleted_parking: int


class PresenceBulkResponse(BaseModel):
    applied: bool
    requires_confirmation: bool
    conflicts: List[BulkReservationEntry]
    updated: int
    dates: List[str]
    deleted: BulkDeleted


class PresenceMonthResponse(BaseModel):
    entries: Dict[str, PresenceMode]


class SummaryPerson(BaseModel):
    name: str
    desk_code: Optional[str] = None


class SummaryCounts(BaseModel):
    total: int
    total_desks: int
    office: int
    home: int
    absent: int


class PresenceSummaryResponse(BaseModel):
    """Who is where on one day"""
    date: str
    office: List[SummaryPerson]
    home: List[SummaryPerson]
    absent: List[SummaryPerson]
    counts: SummaryCounts
