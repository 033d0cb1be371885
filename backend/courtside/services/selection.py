"""
Booking wizard state machine.

The wizard walks date → court → time → equipment → coach → confirm. Its state
is an immutable BookingSelection; each user action is a function returning a
new selection. Cascading resets live here and nowhere else:

  - choosing a date clears the time range and the coach (booked slots are date-scoped)
  - choosing a court clears the time range and the coach (booked slots are court-scoped)
  - a slot click that moves the range drops a coach who cannot cover the new range
  - equipment and coach edits never touch date, court or time

Slot-click protocol for a clicked slot S and current (start, end). S must be
one of the opening-hours slots:

  1. S is booked                  -> no change
  2. no start yet                 -> start = S, end = h(S) + 1
  3. S == start                   -> clear start and end
  4. h(S) > h(start)              -> if any slot in [h(start), h(S)) is booked,
                                     no change; else end = h(S) + 1
  5. otherwise (S before start)   -> restart: start = S, end = h(S) + 1
"""

from datetime import date
from typing import Iterable, Optional, Sequence

from courtside.schemas.booking import BookingSelection, PriceBreakdown, SelectedEquipment
from courtside.schemas.catalog import (
    CoachAvailabilityResponse,
    CoachResponse,
    CourtResponse,
    EquipmentResponse,
    PricingRuleResponse,
)
from courtside.services.availability_service import is_coach_eligible
from courtside.services.pricing_service import calculate_price
from courtside.services.slots import (
    DEFAULT_CLOSE_HOUR,
    DEFAULT_OPEN_HOUR,
    TimeRange,
    format_slot,
    generate_slots,
    hour_of,
    is_slot_booked,
)


def select_date(selection: BookingSelection, booking_date: date, today: date) -> BookingSelection:
    if booking_date < today:
        raise ValueError("Cannot book a date in the past")
    return selection.model_copy(
        update={"booking_date": booking_date, "start_time": None, "end_time": None, "coach": None}
    )


def select_court(selection: BookingSelection, court: CourtResponse) -> BookingSelection:
    return selection.model_copy(
        update={"court": court, "start_time": None, "end_time": None, "coach": None}
    )


def click_slot(
    selection: BookingSelection,
    slot: str,
    bookings: Iterable[TimeRange],
    open_hour: int = DEFAULT_OPEN_HOUR,
    close_hour: int = DEFAULT_CLOSE_HOUR,
    availability: Sequence[CoachAvailabilityResponse] = (),
) -> BookingSelection:
    """
    Apply one slot click. A selected coach survives only if `availability`
    shows them covering the resulting range.
    """
    if selection.booking_date is None or selection.court is None:
        raise ValueError("Choose a date and a court before picking a time")

    slots = generate_slots(open_hour, close_hour)
    if slot not in slots:
        raise ValueError(f"{slot} is not a bookable slot")

    bookings = list(bookings)
    if is_slot_booked(slot, bookings):
        return selection

    start = selection.start_time
    slot_hour = hour_of(slot)

    if not start:
        updated = _restart_range(selection, slot)
    elif slot == start:
        updated = selection.model_copy(update={"start_time": None, "end_time": None})
    elif slot_hour > hour_of(start):
        blocked = any(
            hour_of(start) <= hour_of(s) < slot_hour and is_slot_booked(s, bookings)
            for s in slots
        )
        if blocked:
            return selection
        updated = selection.model_copy(update={"end_time": format_slot(slot_hour + 1)})
    else:
        updated = _restart_range(selection, slot)

    return revalidate_coach(updated, availability)


def _restart_range(selection: BookingSelection, slot: str) -> BookingSelection:
    return selection.model_copy(update={"start_time": slot, "end_time": format_slot(hour_of(slot) + 1)})


def revalidate_coach(
    selection: BookingSelection,
    availability: Sequence[CoachAvailabilityResponse],
) -> BookingSelection:
    """Drop the coach unless one of their windows still covers the selected range."""
    coach = selection.coach
    if coach is None:
        return selection
    if (
        selection.booking_date
        and selection.start_time
        and selection.end_time
        and is_coach_eligible(
            coach, availability, selection.booking_date, selection.start_time, selection.end_time
        )
    ):
        return selection
    return selection.model_copy(update={"coach": None})


def equipment_quantity(selection: BookingSelection, equipment_id: int) -> int:
    for line in selection.equipment:
        if line.equipment.id == equipment_id:
            return line.quantity
    return 0


def set_equipment_quantity(
    selection: BookingSelection,
    equipment: EquipmentResponse,
    quantity: int,
) -> BookingSelection:
    """Set a line's quantity, clamped into [0, total_quantity]. Zero drops the line."""
    quantity = max(0, min(equipment.total_quantity, quantity))

    lines = []
    found = False
    for line in selection.equipment:
        if line.equipment.id != equipment.id:
            lines.append(line)
            continue
        found = True
        if quantity:
            lines.append(SelectedEquipment(equipment=line.equipment, quantity=quantity))

    if not found and quantity:
        lines.append(SelectedEquipment(equipment=equipment, quantity=quantity))

    return selection.model_copy(update={"equipment": tuple(lines)})


def adjust_equipment(selection: BookingSelection, equipment: EquipmentResponse, delta: int) -> BookingSelection:
    current = equipment_quantity(selection, equipment.id)
    return set_equipment_quantity(selection, equipment, current + delta)


def select_coach(
    selection: BookingSelection,
    coach: Optional[CoachResponse],
    availability: Sequence[CoachAvailabilityResponse],
) -> BookingSelection:
    if coach is not None:
        if not (selection.booking_date and selection.start_time and selection.end_time):
            raise ValueError("Choose a date and time before picking a coach")
        if not is_coach_eligible(
            coach, availability, selection.booking_date, selection.start_time, selection.end_time
        ):
            raise ValueError(f"{coach.name} is not available for the selected time")
    return selection.model_copy(update={"coach": coach})


def is_complete(selection: BookingSelection) -> bool:
    return bool(
        selection.booking_date
        and selection.court
        and selection.start_time
        and selection.end_time
    )


def quote(selection: BookingSelection, rules: Iterable[PricingRuleResponse]) -> Optional[PriceBreakdown]:
    """Breakdown for a complete selection, None while anything required is missing."""
    if not is_complete(selection):
        return None
    return calculate_price(
        selection.court,
        selection.booking_date,
        selection.start_time,
        selection.end_time,
        rules,
        selection.equipment,
        selection.coach,
    )
