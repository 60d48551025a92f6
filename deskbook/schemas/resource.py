"""
Inventory Pydantic schemas (API requests/responses)
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class ResourceCreate(BaseModel):
    """Desk or parking spot creation request"""
    code: str = Field(..., min_length=1, max_length=10)
    name: str = Field(..., min_length=1, max_length=100)
    location_label: Optional[str] = Field(None, min_length=1, max_length=100)


class ResourceUpdate(BaseModel):
    """Partial update"""
    code: Optional[str] = Field(None, min_length=1, max_length=10)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    location_label: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None

    @field_validator("code", "name", "is_active")
    @classmethod
    def reject_null(cls, v):
        # omit a field to keep it; only location_label can be cleared
        if v is None:
            raise ValueError("may not be null")
        return v


class ResourceResponse(BaseModel):
    """Resource response"""
    id: int
    code: str
    name: str
    location_label: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ResourceAdminResponse(ResourceResponse):
    """Admin listing entry"""
    reservations_count: int


class ResourceSlotResponse(BaseModel):
    """One cell of the daily desk/parking grid"""
    id: int
    code: str
    name: str
    location_label: Optional[str] = None
    is_reserved: bool
    is_mine: bool
    reserved_by: Optional[str] = None
    reservation_id: Optional[int] = None
