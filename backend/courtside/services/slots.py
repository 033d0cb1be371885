"""
Time & slot model for a bookable day.

A day is a sequence of hourly slots labelled "HH:00" from the venue's opening
hour (inclusive) to its closing hour (exclusive). All queries here are pure:
callers pass the slot list and the court/date bookings they already fetched.

Bookings are anything with `start_time` / `end_time` attributes (ORM rows or
schemas); an optional `status` of "cancelled" excludes them.
"""

from typing import Iterable, Optional, Protocol

DEFAULT_OPEN_HOUR = 6
DEFAULT_CLOSE_HOUR = 22

# Fixed peak-hours policy used to highlight slots
PEAK_START_HOUR = 18
PEAK_END_HOUR = 21


class TimeRange(Protocol):
    start_time: str
    end_time: str


def parse_time(value: str) -> tuple[int, int]:
    """Split "HH:MM" into (hour, minute). Raises ValueError when malformed."""
    parts = value.split(":") if isinstance(value, str) else []
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 24 and 0 <= minute < 60) or (hour == 24 and minute):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return hour, minute


def hour_of(value: str) -> int:
    return parse_time(value)[0]


def format_slot(hour: int) -> str:
    return f"{hour:02d}:00"


def generate_slots(open_hour: int = DEFAULT_OPEN_HOUR, close_hour: int = DEFAULT_CLOSE_HOUR) -> list[str]:
    return [format_slot(hour) for hour in range(open_hour, close_hour)]


def _is_live(booking: TimeRange) -> bool:
    return getattr(booking, "status", None) != "cancelled"


def is_slot_booked(slot: str, bookings: Iterable[TimeRange]) -> bool:
    """True iff the slot hour falls in [start_hour, end_hour) of a live booking."""
    slot_hour = hour_of(slot)
    return any(
        hour_of(b.start_time) <= slot_hour < hour_of(b.end_time)
        for b in bookings
        if _is_live(b)
    )


def is_peak(slot: str) -> bool:
    return PEAK_START_HOUR <= hour_of(slot) < PEAK_END_HOUR


def is_in_selected_range(slot: str, start_time: Optional[str], end_time: Optional[str]) -> bool:
    if not start_time or not end_time:
        return False
    return hour_of(start_time) <= hour_of(slot) < hour_of(end_time)


def slot_states(
    slots: Iterable[str],
    bookings: Iterable[TimeRange],
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
) -> list[dict]:
    """Per-slot flags for rendering a slot grid."""
    bookings = list(bookings)
    return [
        {
            "time": slot,
            "label": format_time(slot),
            "booked": is_slot_booked(slot, bookings),
            "peak": is_peak(slot),
            "selected": slot == start_time or is_in_selected_range(slot, start_time, end_time),
        }
        for slot in slots
    ]


def format_time(value: str) -> str:
    """Render "18:30" as "6:30 PM"."""
    hour, minute = parse_time(value)
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


def format_price(amount: float) -> str:
    """USD currency string, e.g. 1234.5 -> "$1,234.50", -5 -> "-$5.00"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
