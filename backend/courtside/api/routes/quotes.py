"""
Price quotes: the breakdown a booking would get, without persisting anything.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.metrics import price_quotes
from courtside.db.session import get_db
from courtside.schemas.booking import PriceBreakdown, QuoteRequest
from courtside.services.booking_service import price_request

router = APIRouter(prefix="/quotes", tags=["Quotes"])


@router.post("/", response_model=PriceBreakdown)
async def quote_endpoint(request: QuoteRequest, db: AsyncSession = Depends(get_db)):
    """
    Price a court window with optional equipment and coach.
    Uses live pricing rules; the number may differ from the one stored
    at booking time if rules change in between.
    """
    _, _, breakdown = await price_request(db, request)
    price_quotes.inc()
    return breakdown
