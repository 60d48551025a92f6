"""
User Pydantic schemas (API requests/responses)
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
import re

from deskbook.models.user import UserRole

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(v: str) -> str:
    v = v.strip()
    if not _EMAIL_RE.match(v):
        raise ValueError("Invalid email format")
    return v


class UserCreate(BaseModel):
    """Admin user creation request"""
    name: str = Field(..., min_length=2, max_length=100)
    email: str
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.USER

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class UserLogin(BaseModel):
    """Login request"""
    email: str
    password: str


class UserUpdate(BaseModel):
    """Admin partial update"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_email(v)


class UserResponse(BaseModel):
    """User response"""
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserStats(BaseModel):
    total_reservations: int
    total_parking_reservations: int
    current_presence: Optional[str] = None


class UserAdminResponse(UserResponse):
    """Admin listing entry"""
    stats: UserStats


class TokenResponse(BaseModel):
    """Token response"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class TokenPayload(BaseModel):
    """Token payload"""
    sub: str
    exp: int
    iat: int
    role: UserRole
