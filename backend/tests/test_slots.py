"""
Tests for the hourly slot model and display formatting.
"""

from types import SimpleNamespace

import pytest

from courtside.services.slots import (
    format_price,
    format_time,
    generate_slots,
    is_in_selected_range,
    is_peak,
    is_slot_booked,
    parse_time,
    slot_states,
)


def booking(start, end, status="confirmed"):
    return SimpleNamespace(start_time=start, end_time=end, status=status)


def test_generate_slots_default_day():
    """Default venue day runs 06:00 through 21:00."""
    slots = generate_slots()
    assert len(slots) == 16
    assert slots[0] == "06:00"
    assert slots[-1] == "21:00"


def test_generate_slots_custom_hours():
    assert generate_slots(8, 11) == ["08:00", "09:00", "10:00"]
    assert generate_slots(8, 8) == []


def test_booked_range_is_half_open():
    """A 10:00-12:00 booking covers 10:00 and 11:00 but not 12:00."""
    bookings = [booking("10:00", "12:00")]
    assert not is_slot_booked("09:00", bookings)
    assert is_slot_booked("10:00", bookings)
    assert is_slot_booked("11:00", bookings)
    assert not is_slot_booked("12:00", bookings)


def test_cancelled_bookings_do_not_block():
    assert not is_slot_booked("10:00", [booking("10:00", "12:00", status="cancelled")])


def test_booked_check_compares_whole_hours():
    """Minutes are dropped: 10:30-11:30 blocks the 10:00 slot only."""
    bookings = [booking("10:30", "11:30")]
    assert is_slot_booked("10:00", bookings)
    assert not is_slot_booked("11:00", bookings)


def test_no_bookings_means_nothing_booked():
    assert not any(is_slot_booked(s, []) for s in generate_slots())


@pytest.mark.parametrize("slot,expected", [
    ("17:00", False),
    ("18:00", True),
    ("20:00", True),
    ("21:00", False),
])
def test_peak_window(slot, expected):
    assert is_peak(slot) is expected


def test_selected_range_needs_both_ends():
    assert not is_in_selected_range("10:00", "10:00", None)
    assert is_in_selected_range("10:00", "10:00", "12:00")
    assert is_in_selected_range("11:00", "10:00", "12:00")
    assert not is_in_selected_range("12:00", "10:00", "12:00")


def test_slot_states_flags():
    states = slot_states(
        generate_slots(),
        [booking("08:00", "09:00"), booking("19:00", "20:00", status="cancelled")],
        start_time="10:00",
        end_time="12:00",
    )
    by_time = {s["time"]: s for s in states}

    assert by_time["08:00"]["booked"]
    assert not by_time["19:00"]["booked"]
    assert by_time["19:00"]["peak"]
    assert by_time["10:00"]["selected"] and by_time["11:00"]["selected"]
    assert not by_time["12:00"]["selected"]
    assert by_time["18:00"]["label"] == "6:00 PM"


def test_start_slot_selected_before_end_is_known():
    states = slot_states(["09:00", "10:00"], [], start_time="10:00")
    assert [s["selected"] for s in states] == [False, True]


@pytest.mark.parametrize("value,expected", [
    ("00:00", "12:00 AM"),
    ("09:05", "9:05 AM"),
    ("12:00", "12:00 PM"),
    ("18:30", "6:30 PM"),
])
def test_format_time(value, expected):
    assert format_time(value) == expected


@pytest.mark.parametrize("amount,expected", [
    (0, "$0.00"),
    (97.5, "$97.50"),
    (1234.5, "$1,234.50"),
    (-5, "-$5.00"),
])
def test_format_price(amount, expected):
    assert format_price(amount) == expected


@pytest.mark.parametrize("value", ["9", "ab:cd", "10:60", "25:00", "24:30", ""])
def test_parse_time_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_time(value)


def test_parse_time_accepts_end_of_day():
    assert parse_time("24:00") == (24, 0)
    assert parse_time("07:45") == (7, 45)
