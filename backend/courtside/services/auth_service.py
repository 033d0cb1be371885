"""
Player accounts: sign-up, sign-in and the signed-in player's profile.
"""

from datetime import date

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.config import get_settings
from courtside.core.logging import get_logger
from courtside.core.security import create_access_token, hash_password, verify_password
from courtside.models.booking import Booking
from courtside.models.user import User
from courtside.schemas.user import Token, UserCreate, UserLogin, UserProfile

logger = get_logger(__name__)
settings = get_settings()


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Create a player account. Email and username are both unique;
    a clash on either returns 409, email reported first.
    """
    result = await db.execute(
        select(User.email, User.username).where(
            or_(User.email == user_data.email, User.username == user_data.username)
        )
    )
    taken = result.all()
    if any(email == user_data.email for email, _ in taken):
        logger.warning("registration_failed", reason="email_exists")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    if taken:
        logger.warning("registration_failed", reason="username_exists", username=user_data.username)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")

    user = User(
        email=user_data.email,
        username=user_data.username,
        full_name=user_data.full_name,
        phone=user_data.phone,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> Token:
    """Check credentials and issue a bearer token. 401 on bad credentials, 403 if deactivated."""
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    # Same answer for unknown email and wrong password
    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        logger.warning("login_refused", user_id=user.id, reason="deactivated")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    logger.info("user_logged_in", user_id=user.id)
    return Token(
        access_token=create_access_token(data={"sub": str(user.id)}),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


async def get_profile(db: AsyncSession, user_id: int, today: date) -> UserProfile:
    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        # Token outlived the account
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await db.execute(
        select(func.count(Booking.id)).where(
            Booking.user_id == user_id,
            Booking.status == "confirmed",
            Booking.booking_date >= today,
        )
    )
    profile = UserProfile.model_validate(user)
    return profile.model_copy(update={"upcoming_bookings": result.scalar_one()})
