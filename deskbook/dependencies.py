"""
Request dependencies
Authentication, role checks and the injected clock
"""
from datetime import date
from fastapi import Depends, Header
from sqlalchemy.orm import Session
from typing import Optional
from deskbook.database import get_db
from deskbook.security.auth import verify_token
from deskbook.models.user import User, UserRole
from deskbook.utils.dates import utc_today
from deskbook.utils.exceptions import UnauthorizedException, ForbiddenException


def get_today() -> date:
    """Current UTC day; overridden in tests to pin the calendar"""
    return utc_today()


async def get_current_user(
        db: Session = Depends(get_db),
        authorization: Optional[str] = Header(None)
) -> User:
    """
    Resolve the authenticated user
    - extracts and verifies the Bearer token from the Authorization header
    """
    if not authorization:
        raise UnauthorizedException(detail="Missing authorization header")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise UnauthorizedException(detail="Invalid authorization header format")
    if scheme.lower() != "bearer":
        raise UnauthorizedException(detail="Invalid authentication scheme")

    token_payload = verify_token(token)
    if not token_payload:
        raise UnauthorizedException(detail="Invalid or expired token")

    try:
        user_id = int(token_payload.sub)
    except ValueError:
        raise UnauthorizedException(detail="Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UnauthorizedException(detail="User no longer exists")
    if not user.is_active:
        raise UnauthorizedException(detail="User account is inactive")

    return user


def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Require the ADMIN role"""
    if current_user.role != UserRole.ADMIN:
        raise ForbiddenException("Admin access required")
    return current_user
