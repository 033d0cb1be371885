"""
Server-side slot selection: applies the slot-click protocol against the
court's live bookings so thin clients don't need to reimplement it.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.config import get_settings
from courtside.db.session import get_db
from courtside.schemas.availability import SelectionRangeResponse, SlotClickRequest
from courtside.schemas.booking import BookingSelection
from courtside.schemas.catalog import CourtResponse
from courtside.services import catalog_service
from courtside.services.booking_service import get_court_bookings
from courtside.services.selection import click_slot

settings = get_settings()
router = APIRouter(prefix="/selection", tags=["Selection"])


@router.post("/slot-click", response_model=SelectionRangeResponse)
async def slot_click_endpoint(request: SlotClickRequest, db: AsyncSession = Depends(get_db)):
    court = await catalog_service.get_active_court(db, request.court_id)
    bookings = await get_court_bookings(db, request.court_id, request.booking_date)

    current = BookingSelection(
        booking_date=request.booking_date,
        court=CourtResponse.model_validate(court),
        start_time=request.start_time,
        end_time=request.end_time,
    )
    try:
        updated = click_slot(current, request.slot, bookings, settings.OPEN_HOUR, settings.CLOSE_HOUR)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return SelectionRangeResponse(
        start_time=updated.start_time,
        end_time=updated.end_time,
        changed=updated != current,
    )
