"""
Authentication API routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from deskbook.database import get_db
from deskbook.schemas.user import UserLogin, UserResponse, TokenResponse
from deskbook.services.user_service import UserService
from deskbook.security.auth import create_access_token
from deskbook.dependencies import get_current_user
from deskbook.models.user import User

router = APIRouter(
    prefix="/api/auth",
    tags=["Authentication"]
)


@router.post("/login", response_model=TokenResponse)
async def login(
        user_login: UserLogin,
        db: Session = Depends(get_db)
):
    """Log in and issue an access token"""
    user = UserService.authenticate_user(db, user_login)
    access_token = create_access_token(user.id, user.role.value)

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user
    }


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
        current_user: User = Depends(get_current_user)
):
    """Current user from the token"""
    return current_user
