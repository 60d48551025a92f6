"""
Custom exception classes

Every booking/presence error carries a distinguishing ``kind`` and a
human-readable message. They are rendered by the handler registered in
``deskbook.main`` as ``{"error": kind, "detail": message, ...}``.
"""
from typing import Any, Optional
from fastapi import HTTPException, status


class AppException(Exception):
    """Base application exception"""
    kind = "Error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message, **self.extra}


class ValidationException(AppException):
    """Malformed input, rejected before touching the ledger"""
    kind = "ValidationError"
    default_message = "Validation error"


class PastDateException(AppException):
    """Date lies before today (UTC)"""
    kind = "PastDate"
    default_message = "Cannot change the past"


class ResourceUnavailableException(AppException):
    """Resource does not exist or is inactive"""
    kind = "ResourceUnavailable"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource does not exist or is inactive"


class PresenceRequiredException(AppException):
    """Booking requires OFFICE presence for the day"""
    kind = "PresenceRequired"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Set your presence to OFFICE for this day before booking"


class ResourceAlreadyBookedException(AppException):
    kind = "ResourceAlreadyBooked"
    status_code = status.HTTP_409_CONFLICT
    default_message = "This resource is already booked for that day"


class UserAlreadyBookedException(AppException):
    kind = "UserAlreadyBooked"
    status_code = status.HTTP_409_CONFLICT
    default_message = "You already have a booking of this kind for that day"


class NotFoundException(AppException):
    """Resource not found"""
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ForbiddenException(AppException):
    """Not enough permissions"""
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not enough permissions"


class DuplicateException(AppException):
    """Unique code or email already taken"""
    kind = "DuplicateCode"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class HasFutureReservationsException(AppException):
    kind = "HasFutureReservations"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, count: int, message: Optional[str] = None):
        self.count = count
        super().__init__(
            message or f"There are {count} future reservations; cancel them first or deactivate instead",
            count=count,
        )


class ConflictException(AppException):
    """Uniqueness violation that could not be attributed to a known constraint"""
    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Reservation conflict"


class PartialApplicationException(AppException):
    """Bulk reconciliation deleted reservations but failed to update presence"""
    kind = "PartialApplication"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, deleted: dict, message: Optional[str] = None):
        self.deleted = deleted
        super().__init__(
            message or "Reservations were cancelled but the presence mode could not be updated",
            deleted=deleted,
        )


class UnauthorizedException(HTTPException):
    """Authentication missing or failed"""
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )
