"""
Pricing rule engine.

PRICING MODEL: Sequential Compounding Fold
==========================================

  base  = court.base_hourly_rate × duration_hours
  price = base
  for rule in active rules, ascending priority (stable):
      if rule applies to (court, booking date, start hour):
          effect = price × (multiplier − 1) + flat_fee
          price  = price × multiplier + flat_fee

  subtotal = price
  total    = subtotal + equipment_total + coach_fee

  Each rule compounds on the output of the previous one, flat fees included.
  Example (weekend ×1.25 at priority 1, peak ×1.3 at priority 2, $60/hr,
  Saturday 19:00–20:00): 60 → 75 → 97.5.

  Applicability is judged on the original booking (date, start hour, court
  type), never on the running price. Equipment and coach fees are added
  after the fold and are not affected by any rule.

The engine is pure: callers resolve ids into catalog records first
(`resolve_equipment`, `resolve_coach`) and pass everything in.
"""

from datetime import date
from typing import Iterable, Optional, Sequence

from courtside.core.logging import get_logger
from courtside.schemas.booking import AppliedRule, EquipmentLineRequest, PriceBreakdown, SelectedEquipment
from courtside.schemas.catalog import CoachResponse, CourtResponse, EquipmentResponse, PricingRuleResponse
from courtside.services.slots import parse_time

logger = get_logger(__name__)


class PricingError(ValueError):
    """The request cannot be priced (bad time range, bad quantity, ...)."""


class UnknownItemError(PricingError):
    """A referenced equipment item or coach is not in the supplied catalog."""


def booking_duration_hours(start_time: str, end_time: str) -> float:
    try:
        start_hour, start_min = parse_time(start_time)
        end_hour, end_min = parse_time(end_time)
    except ValueError as e:
        raise PricingError(str(e)) from e

    duration = (end_hour + end_min / 60) - (start_hour + start_min / 60)
    if duration <= 0:
        raise PricingError(f"End time {end_time} must be after start time {start_time}")
    return duration


def calculate_price(
    court: CourtResponse,
    booking_date: date,
    start_time: str,
    end_time: str,
    rules: Iterable[PricingRuleResponse],
    equipment_selection: Iterable[SelectedEquipment] = (),
    coach: Optional[CoachResponse] = None,
) -> PriceBreakdown:
    duration = booking_duration_hours(start_time, end_time)
    start_hour = parse_time(start_time)[0]

    base_court_price = court.base_hourly_rate * duration

    # sorted() is stable, so equal priorities keep their input order
    sorted_rules = sorted((r for r in rules if r.is_active), key=lambda r: r.priority)

    current_price = base_court_price
    applied_rules: list[AppliedRule] = []

    for rule in sorted_rules:
        if not rule.applies(court, booking_date, start_hour):
            continue

        effect = current_price * (rule.multiplier - 1) + rule.flat_fee
        current_price = current_price * rule.multiplier + rule.flat_fee
        applied_rules.append(
            AppliedRule(
                name=rule.name,
                type=rule.rule_type,
                multiplier=rule.multiplier,
                flat_fee=rule.flat_fee,
                effect=effect,
            )
        )

    equipment_total = sum(
        item.equipment.hourly_rate * item.quantity * duration
        for item in equipment_selection
    )
    coach_fee = coach.hourly_rate * duration if coach else 0.0

    breakdown = PriceBreakdown(
        base_court_price=base_court_price,
        applied_rules=applied_rules,
        equipment_total=equipment_total,
        coach_fee=coach_fee,
        subtotal=current_price,
        total=current_price + equipment_total + coach_fee,
    )

    logger.debug(
        "price_calculated",
        court_id=court.id,
        booking_date=booking_date.isoformat(),
        start_time=start_time,
        end_time=end_time,
        rules_applied=len(applied_rules),
        total=breakdown.total,
    )
    return breakdown


def resolve_equipment(
    requested: Iterable[EquipmentLineRequest],
    catalog: Sequence[EquipmentResponse],
) -> tuple[SelectedEquipment, ...]:
    """Turn (equipment_id, quantity) requests into priced selection lines."""
    by_id = {item.id: item for item in catalog}
    lines = []

    for line in requested:
        equipment = by_id.get(line.equipment_id)
        if equipment is None:
            raise UnknownItemError(f"Equipment {line.equipment_id} not found")
        if not 0 < line.quantity <= equipment.total_quantity:
            raise PricingError(
                f"Quantity for {equipment.name} must be between 1 and {equipment.total_quantity}"
            )
        lines.append(SelectedEquipment(equipment=equipment, quantity=line.quantity))

    return tuple(lines)


def resolve_coach(coach_id: Optional[int], coaches: Sequence[CoachResponse]) -> Optional[CoachResponse]:
    if coach_id is None:
        return None
    for coach in coaches:
        if coach.id == coach_id:
            return coach
    raise UnknownItemError(f"Coach {coach_id} not found")
