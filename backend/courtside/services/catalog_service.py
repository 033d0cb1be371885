"""
Reference data reads: courts, equipment, coaches, coach availability, pricing rules.

Rows are returned as frozen schemas so the pricing and availability engines
work on plain values, never on live ORM objects.
"""

from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.models.coach import Coach, CoachAvailability
from courtside.models.court import Court
from courtside.models.equipment import Equipment
from courtside.models.pricing_rule import PricingRule
from courtside.schemas.catalog import (
    CoachAvailabilityResponse,
    CoachResponse,
    CourtResponse,
    EquipmentResponse,
    PricingRuleResponse,
    pricing_rule_adapter,
)


async def list_courts(db: AsyncSession) -> list[CourtResponse]:
    result = await db.execute(
        select(Court).where(Court.is_active.is_(True)).order_by(Court.name)
    )
    return [CourtResponse.model_validate(c) for c in result.scalars().all()]


async def get_active_court(db: AsyncSession, court_id: int) -> Court:
    result = await db.execute(
        select(Court).where(Court.id == court_id, Court.is_active.is_(True))
    )
    court = result.scalar_one_or_none()
    if not court:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Court {court_id} not found",
        )
    return court


async def list_equipment(db: AsyncSession) -> list[EquipmentResponse]:
    result = await db.execute(
        select(Equipment).where(Equipment.is_active.is_(True)).order_by(Equipment.name)
    )
    return [EquipmentResponse.model_validate(e) for e in result.scalars().all()]


async def list_coaches(db: AsyncSession) -> list[CoachResponse]:
    result = await db.execute(
        select(Coach).where(Coach.is_active.is_(True)).order_by(Coach.name)
    )
    return [CoachResponse.model_validate(c) for c in result.scalars().all()]


async def list_coach_availability(
    db: AsyncSession,
    coach_id: Optional[int] = None,
) -> list[CoachAvailabilityResponse]:
    query = select(CoachAvailability)
    if coach_id is not None:
        query = query.where(CoachAvailability.coach_id == coach_id)
    result = await db.execute(query.order_by(CoachAvailability.id))
    return [CoachAvailabilityResponse.model_validate(w) for w in result.scalars().all()]


async def list_pricing_rules(db: AsyncSession) -> list[PricingRuleResponse]:
    """Active rules, ordered by priority. The engine re-sorts anyway."""
    result = await db.execute(
        select(PricingRule)
        .where(PricingRule.is_active.is_(True))
        .order_by(PricingRule.priority, PricingRule.id)
    )
    return [pricing_rule_adapter.validate_python(_rule_row(r)) for r in result.scalars().all()]


def _rule_row(rule: PricingRule) -> dict:
    # Flat row -> dict; the discriminator picks the variant and drops unused columns
    return {column.key: getattr(rule, column.key) for column in PricingRule.__table__.columns}
