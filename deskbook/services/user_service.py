"""
User management service
"""
import logging
from datetime import date
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from deskbook.models.presence import Presence
from deskbook.models.user import User, UserRole
from deskbook.schemas.user import UserCreate, UserUpdate, UserLogin
from deskbook.security.auth import hash_password, verify_password
from deskbook.services.ledger import DESK_LEDGER, PARKING_LEDGER, ReservationLedger
from deskbook.utils.exceptions import (
    DuplicateException,
    ForbiddenException,
    HasFutureReservationsException,
    NotFoundException,
    UnauthorizedException,
)

logger = logging.getLogger(__name__)


class UserService:
    """User management service"""

    @staticmethod
    def create_user(db: Session, user_data: UserCreate) -> User:
        """Create a user (admin action)"""
        if db.query(User).filter(User.email == user_data.email).first():
            raise DuplicateException(detail_email(user_data.email))

        user = User(
            name=user_data.name,
            email=user_data.email,
            password_hash=hash_password(user_data.password),
            role=user_data.role,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateException(detail_email(user_data.email))
        db.refresh(user)
        logger.info("user %s created with role %s", user.email, user.role.value)
        return user

    @staticmethod
    def authenticate_user(db: Session, user_login: UserLogin) -> User:
        """Check credentials"""
        user = db.query(User).filter(User.email == user_login.email).first()

        if not user or not verify_password(user_login.password, user.password_hash):
            raise UnauthorizedException(detail="Invalid email or password")

        if not user.is_active:
            raise UnauthorizedException(detail="User account is inactive")

        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> User:
        """Get a user by ID"""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundException(f"User with ID {user_id} not found")
        return user

    @staticmethod
    def list_users(db: Session, today: date) -> List[dict]:
        """All users with reservation totals and today's presence"""
        users = db.query(User).order_by(User.name).all()
        result = []
        for u in users:
            presence = db.query(Presence).filter(
                Presence.user_id == u.id,
                Presence.date == today,
            ).first()
            result.append({
                "id": u.id,
                "name": u.name,
                "email": u.email,
                "role": u.role,
                "is_active": u.is_active,
                "created_at": u.created_at,
                "stats": {
                    "total_reservations": ReservationLedger.count_for_user(db, DESK_LEDGER, u.id),
                    "total_parking_reservations": ReservationLedger.count_for_user(db, PARKING_LEDGER, u.id),
                    "current_presence": presence.mode.value if presence else None,
                },
            })
        return result

    @staticmethod
    def update_user(db: Session, user_id: int, user_data: UserUpdate, acting_user: User) -> User:
        """Admin partial update; admins cannot deactivate or demote themselves"""
        user = UserService.get_user_by_id(db, user_id)
        is_self = user.id == acting_user.id

        if is_self and user_data.is_active is False:
            raise ForbiddenException("You cannot deactivate your own account")
        if is_self and user_data.role == UserRole.USER:
            raise ForbiddenException("You cannot remove your own admin role")

        if user_data.email and user_data.email != user.email:
            if db.query(User).filter(User.email == user_data.email).first():
                raise DuplicateException(detail_email(user_data.email))

        update_data = user_data.model_dump(exclude_unset=True, exclude={"password"})
        for field, value in update_data.items():
            if value is not None:
                setattr(user, field, value)
        if user_data.password:
            user.password_hash = hash_password(user_data.password)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateException(detail_email(user_data.email or user.email))
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user_id: int, acting_user: User, today: date) -> None:
        """
        Hard delete. Refused for the acting admin and while the user holds any
        desk or parking reservation from today on. Presences and past
        reservations go together with the user in one transaction.
        """
        if user_id == acting_user.id:
            raise ForbiddenException("You cannot delete your own account")

        user = UserService.get_user_by_id(db, user_id)

        future = sum(
            ReservationLedger.count_future_for_user(db, ledger, user_id, today)
            for ledger in (DESK_LEDGER, PARKING_LEDGER)
        )
        if future > 0:
            raise HasFutureReservationsException(
                future,
                f"User has {future} future reservations; cancel them first or deactivate the account",
            )

        try:
            db.query(Presence).filter(Presence.user_id == user_id).delete(synchronize_session=False)
            for ledger in (DESK_LEDGER, PARKING_LEDGER):
                model = ledger.reservation_model
                db.query(model).filter(model.user_id == user_id).delete(synchronize_session=False)
            db.delete(user)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        logger.info("user %s deleted by admin %s", user_id, acting_user.id)


def detail_email(email: str) -> str:
    return f'User with email "{email}" already exists'
