"""
Player account endpoints: sign-up, sign-in and profile.
"""

from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.clock import get_today
from courtside.core.security import get_current_user_id
from courtside.db.session import get_db
from courtside.schemas.user import Token, UserCreate, UserLogin, UserProfile, UserResponse
from courtside.services.auth_service import authenticate_user, get_profile, register_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await register_user(db, user_data)


@router.post("/login", response_model=Token)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Exchange email and password for a bearer token."""
    return await authenticate_user(db, login_data)


@router.get("/me", response_model=UserProfile)
async def me(
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
):
    """The signed-in player with a count of their upcoming bookings."""
    return await get_profile(db, user_id, today)
