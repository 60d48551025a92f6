"""
Reservation Pydantic schemas (API requests/responses)
"""
from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from enum import Enum
from typing import List, Optional

from deskbook.schemas.common import Day


class ReservationCreate(BaseModel):
    """Reservation request; the user comes from the token"""
    resource_id: int = Field(..., ge=1)
    date: Day


class ReservationResponse(BaseModel):
    """Reservation with the resource code embedded for display"""
    id: int
    user_id: int
    resource_id: int
    date: Day
    code: str
    name: str
    location_label: Optional[str] = None
    created_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _embed_resource(cls, data):
        resource = getattr(data, "resource", None)
        if resource is None:
            return data
        return {
            "id": data.id,
            "user_id": data.user_id,
            "resource_id": data.resource_id,
            "date": data.date,
            "code": resource.code,
            "name": resource.name,
            "location_label": getattr(resource, "location_label", None),
            "created_at": data.created_at,
        }


class ReservationSlot(BaseModel):
    id: int
    code: str


class DailyReservations(BaseModel):
    """The user's desk and parking reservation on one day"""
    desk: Optional[ReservationSlot] = None
    parking: Optional[ReservationSlot] = None


class DailyCancelResponse(BaseModel):
    deleted_desks: List[str]
    deleted_parking: List[str]


class BulkDates(BaseModel):
    dates: List[Day] = Field(..., min_length=1, max_length=62)


class BulkReservationEntry(BaseModel):
    date: str
    desk_code: Optional[str] = None
    parking_code: Optional[str] = None


class CheckBulkResponse(BaseModel):
    reservations: List[BulkReservationEntry]


class BulkDeleteResponse(BaseModel):
    deleted_desks: int
    deleted_parking: int


class OfficePerson(BaseModel):
    desk_code: str
    user_name: str


class OfficeResponse(BaseModel):
    """Desk occupancy for one day"""
    date: str
    reserved_count: int
    capacity: int
    people: List[OfficePerson]


class ReservationType(str, Enum):
    DESK = "desk"
    PARKING = "parking"
    ALL = "all"


class AdminReservationEntry(BaseModel):
    id: int
    type: str
    date: str
    resource_code: str
    resource_name: Optional[str] = None
    user_id: int
    user_name: str
    user_email: str
    created_at: datetime


class AdminReservationSummary(BaseModel):
    total_desk: int
    total_parking: int


class AdminReservationListResponse(BaseModel):
    reservations: List[AdminReservationEntry]
    total: int
    summary: AdminReservationSummary
