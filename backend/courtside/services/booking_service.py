"""
Booking service with conflict-safe court reservation.

CONCURRENCY STRATEGY: Optimistic Locking on the Court Row
=========================================================

Problem:
  Two sessions pick the same free slot on the same court. Both read the
  court's bookings, both see no overlap, both insert.
  Result: Double booking.

Solution:
  Every booking write bumps a `version` column on the Court row, inside the
  same transaction that checks for overlaps and inserts the booking.

  1. Read the court's current version
  2. Look for non-cancelled bookings on (court, date) overlapping
     [start, end) -> 409 "slot no longer available"
  3. UPDATE courts SET version = version + 1
     WHERE id = :court_id AND version = :current_version
  4. If rows_affected == 0, another booking landed on this court -> retry
     from step 1 (its booking may now overlap ours)
  5. Insert the booking and its equipment lines; the request-scoped session
     commits both together or neither

  Contention is per court, not per venue, and most writes succeed first try.

Pricing:
  The breakdown is computed exactly once, before the retry loop, from freshly
  read rules. It is stored as a frozen snapshot; cancelling or later rule
  changes never recompute it.
"""

from datetime import date

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.config import get_settings
from courtside.core.logging import get_logger
from courtside.core.metrics import booking_retries
from courtside.models.booking import Booking, BookingEquipment
from courtside.models.court import Court
from courtside.schemas.booking import BookingCreate, PriceBreakdown, QuoteRequest, SelectedEquipment
from courtside.schemas.catalog import CourtResponse
from courtside.services import catalog_service
from courtside.services.availability_service import is_coach_eligible
from courtside.services.pricing_service import (
    PricingError,
    UnknownItemError,
    calculate_price,
    resolve_coach,
    resolve_equipment,
)
from courtside.services.slots import parse_time

logger = get_logger(__name__)
settings = get_settings()

MAX_RETRY_ATTEMPTS = 3


async def get_court_bookings(db: AsyncSession, court_id: int, booking_date: date) -> list[Booking]:
    """Non-cancelled bookings on a court for one day."""
    result = await db.execute(
        select(Booking).where(
            Booking.court_id == court_id,
            Booking.booking_date == booking_date,
            Booking.status != "cancelled",
        )
    )
    return list(result.scalars().all())


def check_opening_hours(start_time: str, end_time: str) -> None:
    start_hour, _ = parse_time(start_time)
    end_hour, end_min = parse_time(end_time)
    if start_hour < settings.OPEN_HOUR or (end_hour, end_min) > (settings.CLOSE_HOUR, 0):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Bookings must fall between {settings.OPEN_HOUR:02d}:00 and {settings.CLOSE_HOUR:02d}:00",
        )


async def price_request(
    db: AsyncSession,
    data: QuoteRequest,
) -> tuple[Court, tuple[SelectedEquipment, ...], PriceBreakdown]:
    """
    Resolve a quote/booking request against live reference data and price it.
    Raises 404 for unknown ids, 422 for bad quantities, 409 for an
    unavailable coach.
    """
    court = await catalog_service.get_active_court(db, data.court_id)

    try:
        equipment = resolve_equipment(data.equipment, await catalog_service.list_equipment(db))
        coach = resolve_coach(data.coach_id, await catalog_service.list_coaches(db))
    except UnknownItemError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PricingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if coach is not None:
        windows = await catalog_service.list_coach_availability(db, coach.id)
        if not is_coach_eligible(coach, windows, data.booking_date, data.start_time, data.end_time):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{coach.name} is not available for the selected time",
            )

    rules = await catalog_service.list_pricing_rules(db)
    try:
        breakdown = calculate_price(
            CourtResponse.model_validate(court),
            data.booking_date,
            data.start_time,
            data.end_time,
            rules,
            equipment,
            coach,
        )
    except PricingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return court, equipment, breakdown


async def _find_overlap(db: AsyncSession, data: BookingCreate):
    result = await db.execute(
        select(Booking.id).where(
            Booking.court_id == data.court_id,
            Booking.booking_date == data.booking_date,
            Booking.status != "cancelled",
            Booking.start_time < data.end_time,
            Booking.end_time > data.start_time,
        ).limit(1)
    )
    return result.scalar_one_or_none()


async def create_booking(
    db: AsyncSession,
    user_id: int,
    data: BookingCreate,
    today: date,
) -> Booking:
    """
    Reserve a court window with optimistic locking on the court row.
    Retries up to MAX_RETRY_ATTEMPTS on version conflicts.
    """
    if data.booking_date < today:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot book a date in the past",
        )
    check_opening_hours(data.start_time, data.end_time)

    _, equipment, breakdown = await price_request(db, data)

    for attempt in range(1, MAX_RETRY_ATTEMPTS + 1):
        # Step 1: Read current court version
        result = await db.execute(select(Court.version).where(Court.id == data.court_id))
        current_version = result.scalar_one()

        # Step 2: Reject overlaps with live bookings
        if await _find_overlap(db, data):
            logger.warning(
                "booking_conflict",
                court_id=data.court_id,
                booking_date=data.booking_date.isoformat(),
                start_time=data.start_time,
                end_time=data.end_time,
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Selected time slot is no longer available",
            )

        # Step 3: Optimistic lock - claim the court only if nobody else did
        update_result = await db.execute(
            update(Court)
            .where(Court.id == data.court_id, Court.version == current_version)
            .values(version=Court.version + 1)
        )

        if update_result.rowcount == 0:
            logger.info(
                "booking_retry",
                court_id=data.court_id,
                attempt=attempt,
                reason="version_conflict",
            )
            booking_retries.inc()
            await db.rollback()
            if attempt == MAX_RETRY_ATTEMPTS:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Booking failed due to high demand. Please try again.",
                )
            continue

        # Step 4: Create booking with its frozen price snapshot and equipment lines
        booking = Booking(
            user_id=user_id,
            court_id=data.court_id,
            coach_id=data.coach_id,
            booking_date=data.booking_date,
            start_time=data.start_time,
            end_time=data.end_time,
            base_price=breakdown.base_court_price,
            total_price=breakdown.total,
            price_breakdown=breakdown.model_dump(mode="json"),
            status="confirmed",
        )
        booking.equipment_lines = [
            BookingEquipment(
                equipment_id=line.equipment.id,
                quantity=line.quantity,
                unit_price=line.equipment.hourly_rate,
            )
            for line in equipment
        ]
        db.add(booking)
        await db.flush()
        await db.refresh(booking, attribute_names=["court", "coach", "equipment_lines", "created_at"])

        logger.info(
            "booking_created",
            booking_id=booking.id,
            user_id=user_id,
            court_id=data.court_id,
            booking_date=data.booking_date.isoformat(),
            start_time=data.start_time,
            end_time=data.end_time,
            total=breakdown.total,
            attempt=attempt,
        )
        return booking

    # Should not reach here, but just in case
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Booking failed unexpectedly",
    )


async def cancel_booking(
    db: AsyncSession,
    booking_id: int,
    user_id: int,
) -> Booking:
    """Cancel a confirmed booking. The price snapshot is left untouched."""
    result = await db.execute(
        select(Booking).where(
            Booking.id == booking_id,
            Booking.user_id == user_id,
        )
    )
    booking = result.scalar_one_or_none()

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )

    if booking.status != "confirmed":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Booking is already {booking.status}",
        )

    booking.status = "cancelled"
    await db.flush()

    logger.info(
        "booking_cancelled",
        booking_id=booking.id,
        user_id=user_id,
        court_id=booking.court_id,
        booking_date=booking.booking_date.isoformat(),
    )
    return booking


async def get_user_bookings(db: AsyncSession, user_id: int) -> list[Booking]:
    """Get all bookings for a user, newest date first."""
    result = await db.execute(
        select(Booking)
        .where(Booking.user_id == user_id)
        .order_by(Booking.booking_date.desc(), Booking.start_time.desc())
    )
    return list(result.scalars().all())
