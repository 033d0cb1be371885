"""
Availability endpoints: slot grid per court/day and coach eligibility.
Always computed from live bookings (never cached).
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.config import get_settings
from courtside.db.session import get_db
from courtside.schemas.availability import SlotGridResponse, SlotState
from courtside.schemas.booking import TIME_PATTERN
from courtside.schemas.catalog import CoachEligibilityResponse
from courtside.services import catalog_service
from courtside.services.availability_service import available_days, eligible_coaches
from courtside.services.booking_service import get_court_bookings
from courtside.services.slots import generate_slots, slot_states

settings = get_settings()
router = APIRouter(tags=["Availability"])


@router.get("/courts/{court_id}/slots", response_model=SlotGridResponse)
async def court_slots_endpoint(
    court_id: int,
    booking_date: date = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Hourly slots for a court on a day, flagged booked and peak."""
    await catalog_service.get_active_court(db, court_id)
    bookings = await get_court_bookings(db, court_id, booking_date)
    slots = generate_slots(settings.OPEN_HOUR, settings.CLOSE_HOUR)

    return SlotGridResponse(
        court_id=court_id,
        booking_date=booking_date,
        open_hour=settings.OPEN_HOUR,
        close_hour=settings.CLOSE_HOUR,
        slots=[SlotState(**s) for s in slot_states(slots, bookings)],
    )


@router.get("/coaches/eligible", response_model=list[CoachEligibilityResponse])
async def eligible_coaches_endpoint(
    booking_date: date = Query(...),
    start_time: str = Query(..., pattern=TIME_PATTERN),
    end_time: str = Query(..., pattern=TIME_PATTERN),
    db: AsyncSession = Depends(get_db),
):
    """Every active coach, flagged with whether they can take the window."""
    if end_time <= start_time:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_time must be after start_time",
        )

    coaches = await catalog_service.list_coaches(db)
    windows = await catalog_service.list_coach_availability(db)
    eligible_ids = {c.id for c in eligible_coaches(coaches, windows, booking_date, start_time, end_time)}

    return [
        CoachEligibilityResponse(
            **coach.model_dump(),
            available_days=available_days(coach, windows),
            eligible=coach.id in eligible_ids,
        )
        for coach in coaches
    ]
