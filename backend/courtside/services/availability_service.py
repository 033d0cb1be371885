"""
Availability resolver: which coaches can take a booking window.

Coach windows are recurring weekly ranges. A coach is eligible when any one
of their windows on the booking's weekday fully contains the booking window.
Containment compares whole hours only; minutes are ignored.

Slot conflicts with existing bookings are answered by `slots.is_slot_booked`.
"""

from datetime import date
from typing import Iterable, Sequence

from courtside.schemas.catalog import CoachAvailabilityResponse, CoachResponse, DayOfWeek
from courtside.services.slots import hour_of

WEEKDAYS: tuple[DayOfWeek, ...] = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)


def day_of_week(booking_date: date) -> DayOfWeek:
    return WEEKDAYS[booking_date.weekday()]


def is_coach_eligible(
    coach: CoachResponse,
    windows: Iterable[CoachAvailabilityResponse],
    booking_date: date,
    start_time: str,
    end_time: str,
) -> bool:
    weekday = day_of_week(booking_date)
    booking_start = hour_of(start_time)
    booking_end = hour_of(end_time)

    return any(
        hour_of(w.start_time) <= booking_start and booking_end <= hour_of(w.end_time)
        for w in windows
        if w.coach_id == coach.id and w.day_of_week == weekday
    )


def eligible_coaches(
    coaches: Iterable[CoachResponse],
    windows: Sequence[CoachAvailabilityResponse],
    booking_date: date,
    start_time: str,
    end_time: str,
) -> list[CoachResponse]:
    return [
        coach for coach in coaches
        if is_coach_eligible(coach, windows, booking_date, start_time, end_time)
    ]


def available_days(coach: CoachResponse, windows: Iterable[CoachAvailabilityResponse]) -> list[str]:
    """Weekdays the coach works, as "Mon"-style labels in week order."""
    days = {w.day_of_week for w in windows if w.coach_id == coach.id}
    return [day[:3].capitalize() for day in WEEKDAYS if day in days]
