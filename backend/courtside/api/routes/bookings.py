"""
Booking endpoints with conflict-safe court reservation.
"""

import time
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.db.session import get_db
from courtside.schemas.booking import BookingCreate, BookingResponse, BookingCancelResponse
from courtside.services.booking_service import create_booking, cancel_booking, get_user_bookings
from courtside.core.clock import get_today
from courtside.core.metrics import booking_latency, record_booking_attempt
from courtside.core.security import get_current_user_id
from courtside.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a court window with optional equipment and coach.

    The price breakdown is computed once and stored as a snapshot. If another
    booking takes an overlapping slot first, returns 409.
    """
    start = time.perf_counter()
    try:
        booking = await create_booking(db, user_id, booking_data, today)
    except HTTPException as e:
        record_booking_attempt("conflict" if e.status_code == status.HTTP_409_CONFLICT else "error")
        raise
    finally:
        booking_latency.observe(time.perf_counter() - start)

    record_booking_attempt("success")
    return booking


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking_endpoint(
    booking_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking and free its slots."""
    booking = await cancel_booking(db, booking_id, user_id)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.status,
    )


@router.get("/", response_model=list[BookingResponse])
async def list_user_bookings(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get all bookings for the authenticated user."""
    bookings = await get_user_bookings(db, user_id)
    return bookings
