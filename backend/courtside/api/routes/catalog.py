"""
Reference data endpoints. List reads go through the Redis catalog cache.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.db.session import get_db
from courtside.schemas.catalog import (
    CoachAvailabilityResponse,
    CoachListItem,
    CourtResponse,
    EquipmentResponse,
    PricingRuleResponse,
    pricing_rule_adapter,
)
from courtside.services import catalog_service
from courtside.services.availability_service import available_days
from courtside.services.cache_service import cached_catalog

router = APIRouter(tags=["Catalog"])


@router.get("/courts", response_model=list[CourtResponse])
async def list_courts_endpoint(db: AsyncSession = Depends(get_db)):
    """Active courts by name."""
    return await cached_catalog(
        "courts", lambda: catalog_service.list_courts(db), CourtResponse.model_validate
    )


@router.get("/equipment", response_model=list[EquipmentResponse])
async def list_equipment_endpoint(db: AsyncSession = Depends(get_db)):
    return await cached_catalog(
        "equipment", lambda: catalog_service.list_equipment(db), EquipmentResponse.model_validate
    )


@router.get("/coaches", response_model=list[CoachListItem])
async def list_coaches_endpoint(db: AsyncSession = Depends(get_db)):
    """Active coaches with the weekdays they work."""

    async def load() -> list[CoachListItem]:
        coaches = await catalog_service.list_coaches(db)
        windows = await catalog_service.list_coach_availability(db)
        return [
            CoachListItem(**coach.model_dump(), available_days=available_days(coach, windows))
            for coach in coaches
        ]

    return await cached_catalog("coaches", load, CoachListItem.model_validate)


@router.get("/coaches/{coach_id}/availability", response_model=list[CoachAvailabilityResponse])
async def coach_availability_endpoint(coach_id: int, db: AsyncSession = Depends(get_db)):
    """Weekly working windows of one coach. Not cached."""
    return await catalog_service.list_coach_availability(db, coach_id)


@router.get("/pricing-rules", response_model=list[PricingRuleResponse])
async def list_pricing_rules_endpoint(db: AsyncSession = Depends(get_db)):
    """Active pricing rules in the order they are applied."""
    return await cached_catalog(
        "pricing_rules", lambda: catalog_service.list_pricing_rules(db), pricing_rule_adapter.validate_python
    )
