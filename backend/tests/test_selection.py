"""
Tests for the booking wizard state machine: cascading resets, the slot-click
protocol, equipment quantities, coach choice and live quoting.
"""

import random
from datetime import date
from types import SimpleNamespace

import pytest

from courtside.schemas.booking import BookingSelection
from courtside.schemas.catalog import (
    CoachAvailabilityResponse,
    CoachResponse,
    CourtResponse,
    EquipmentResponse,
    WeekendRule,
)
from courtside.services.selection import (
    adjust_equipment,
    click_slot,
    equipment_quantity,
    is_complete,
    quote,
    revalidate_coach,
    select_coach,
    select_court,
    select_date,
    set_equipment_quantity,
)
from courtside.services.slots import generate_slots, hour_of, is_slot_booked

TODAY = date(2026, 3, 2)  # Monday
SATURDAY = date(2026, 3, 7)

COURT_A = CourtResponse(id=1, name="Court A", court_type="indoor", base_hourly_rate=60.0)
COURT_B = CourtResponse(id=2, name="Court B", court_type="outdoor", base_hourly_rate=40.0)
RACKET = EquipmentResponse(id=1, name="Pro Racket", equipment_type="racket", total_quantity=4, hourly_rate=5.0)
SHOES = EquipmentResponse(id=2, name="Court Shoes", equipment_type="shoes", total_quantity=2, hourly_rate=3.0)
COACH = CoachResponse(id=1, name="Alex Kim", hourly_rate=50.0)
COACH_WINDOWS = [
    CoachAvailabilityResponse(coach_id=1, day_of_week="saturday", start_time="08:00", end_time="12:00"),
]


def booking(start, end):
    return SimpleNamespace(start_time=start, end_time=end, status="confirmed")


@pytest.fixture
def ready():
    """Date and court chosen, no time yet."""
    return BookingSelection(booking_date=SATURDAY, court=COURT_A)


def test_select_date_rejects_past(ready):
    with pytest.raises(ValueError):
        select_date(ready, date(2026, 3, 1), TODAY)


def test_select_date_allows_today():
    assert select_date(BookingSelection(), TODAY, TODAY).booking_date == TODAY


def test_changing_date_clears_time(ready):
    picked = click_slot(ready, "10:00", [])
    changed = select_date(picked, date(2026, 3, 8), TODAY)
    assert changed.start_time is None and changed.end_time is None
    assert changed.court == COURT_A


def test_changing_court_clears_time(ready):
    picked = click_slot(ready, "10:00", [])
    changed = select_court(picked, COURT_B)
    assert changed.court == COURT_B
    assert changed.start_time is None and changed.end_time is None


def test_first_click_starts_one_hour_range(ready):
    sel = click_slot(ready, "14:00", [])
    assert (sel.start_time, sel.end_time) == ("14:00", "15:00")


def test_last_slot_ends_at_close(ready):
    sel = click_slot(ready, "21:00", [])
    assert sel.end_time == "22:00"


def test_clicking_start_again_clears(ready):
    sel = click_slot(click_slot(ready, "14:00", []), "14:00", [])
    assert sel.start_time is None and sel.end_time is None


def test_later_click_extends(ready):
    sel = click_slot(click_slot(ready, "14:00", []), "17:00", [])
    assert (sel.start_time, sel.end_time) == ("14:00", "18:00")


def test_extend_blocked_by_booking_in_between(ready):
    bookings = [booking("16:00", "17:00")]
    start = click_slot(ready, "14:00", bookings)
    assert click_slot(start, "18:00", bookings) == start


def test_booked_slot_click_is_ignored(ready):
    bookings = [booking("16:00", "17:00")]
    start = click_slot(ready, "14:00", bookings)
    assert click_slot(start, "16:00", bookings) == start
    assert click_slot(ready, "16:00", bookings) == ready


def test_earlier_click_restarts(ready):
    sel = click_slot(click_slot(ready, "14:00", []), "17:00", [])
    restarted = click_slot(sel, "10:00", [])
    assert (restarted.start_time, restarted.end_time) == ("10:00", "11:00")


def test_click_does_not_mutate_selection(ready):
    click_slot(ready, "14:00", [])
    assert ready.start_time is None


def test_click_requires_date_and_court():
    with pytest.raises(ValueError):
        click_slot(BookingSelection(booking_date=SATURDAY), "10:00", [])
    with pytest.raises(ValueError):
        click_slot(BookingSelection(court=COURT_A), "10:00", [])


def test_random_clicks_never_cover_booked_slots(ready):
    """Whatever the click sequence, the range stays well-formed and free."""
    bookings = [booking("09:00", "10:00"), booking("13:00", "15:00"), booking("19:00", "20:00")]
    slots = generate_slots()
    rng = random.Random(42)

    for _ in range(50):
        sel = ready
        for _ in range(rng.randint(1, 12)):
            sel = click_slot(sel, rng.choice(slots), bookings)
            if sel.start_time is None:
                assert sel.end_time is None
                continue
            assert hour_of(sel.end_time) > hour_of(sel.start_time)
            assert hour_of(sel.end_time) <= 22
            covered = [s for s in slots if hour_of(sel.start_time) <= hour_of(s) < hour_of(sel.end_time)]
            assert not any(is_slot_booked(s, bookings) for s in covered)


def test_set_equipment_quantity_clamps(ready):
    sel = set_equipment_quantity(ready, RACKET, 10)
    assert equipment_quantity(sel, RACKET.id) == 4
    sel = set_equipment_quantity(sel, RACKET, -3)
    assert equipment_quantity(sel, RACKET.id) == 0
    assert sel.equipment == ()


def test_adjust_equipment_keeps_other_lines(ready):
    sel = adjust_equipment(ready, RACKET, 1)
    sel = adjust_equipment(sel, SHOES, 2)
    sel = adjust_equipment(sel, RACKET, 1)
    assert equipment_quantity(sel, RACKET.id) == 2
    assert equipment_quantity(sel, SHOES.id) == 2
    assert [line.equipment.id for line in sel.equipment] == [RACKET.id, SHOES.id]


def test_random_adjustments_stay_in_stock(ready):
    rng = random.Random(3)
    sel = ready
    for _ in range(200):
        item = rng.choice([RACKET, SHOES])
        sel = adjust_equipment(sel, item, rng.choice([-2, -1, 1, 2, 3]))
        for line in sel.equipment:
            assert 0 < line.quantity <= line.equipment.total_quantity


def test_equipment_edit_keeps_time(ready):
    picked = click_slot(ready, "10:00", [])
    assert adjust_equipment(picked, RACKET, 1).start_time == "10:00"


def test_select_eligible_coach(ready):
    picked = click_slot(ready, "10:00", [])
    sel = select_coach(picked, COACH, COACH_WINDOWS)
    assert sel.coach == COACH
    assert sel.start_time == "10:00"
    assert select_coach(sel, None, COACH_WINDOWS).coach is None


def test_select_ineligible_coach_raises(ready):
    picked = click_slot(ready, "14:00", [])
    with pytest.raises(ValueError):
        select_coach(picked, COACH, COACH_WINDOWS)


def test_select_coach_requires_time(ready):
    with pytest.raises(ValueError):
        select_coach(ready, COACH, COACH_WINDOWS)


def test_quote_only_when_complete(ready):
    rules = [WeekendRule(id=1, name="Weekend", multiplier=1.25, priority=1)]
    assert not is_complete(ready)
    assert quote(ready, rules) is None

    sel = click_slot(click_slot(ready, "10:00", []), "11:00", [])
    sel = adjust_equipment(sel, RACKET, 2)
    sel = select_coach(sel, COACH, COACH_WINDOWS)
    assert is_complete(sel)

    breakdown = quote(sel, rules)
    assert breakdown.subtotal == 150
    assert breakdown.equipment_total == 20
    assert breakdown.coach_fee == 100
    assert breakdown.total == 270


def test_click_outside_opening_hours_raises(ready):
    with pytest.raises(ValueError):
        click_slot(ready, "23:00", [])
    with pytest.raises(ValueError):
        click_slot(ready, "05:00", [])
    with pytest.raises(ValueError):
        click_slot(ready, "09:00", [], open_hour=10, close_hour=20)


def test_moving_range_drops_uncovered_coach(ready):
    """Coach works Saturday 08:00-12:00; extending to 16:00 leaves the window."""
    sel = select_coach(click_slot(ready, "09:00", []), COACH, COACH_WINDOWS)
    moved = click_slot(sel, "15:00", [], availability=COACH_WINDOWS)

    assert (moved.start_time, moved.end_time) == ("09:00", "16:00")
    assert moved.coach is None
    assert quote(moved, []).coach_fee == 0


def test_moving_range_keeps_covering_coach(ready):
    sel = select_coach(click_slot(ready, "09:00", []), COACH, COACH_WINDOWS)
    moved = click_slot(sel, "11:00", [], availability=COACH_WINDOWS)
    assert moved.end_time == "12:00"
    assert moved.coach == COACH


def test_clearing_range_drops_coach(ready):
    sel = select_coach(click_slot(ready, "09:00", []), COACH, COACH_WINDOWS)
    cleared = click_slot(sel, "09:00", [], availability=COACH_WINDOWS)
    assert cleared.start_time is None
    assert cleared.coach is None


def test_date_and_court_changes_drop_coach(ready):
    sel = select_coach(click_slot(ready, "09:00", []), COACH, COACH_WINDOWS)
    assert select_date(sel, date(2026, 3, 8), TODAY).coach is None
    assert select_court(sel, COURT_B).coach is None


def test_revalidate_coach(ready):
    sel = select_coach(click_slot(ready, "10:00", []), COACH, COACH_WINDOWS)
    assert revalidate_coach(sel, COACH_WINDOWS) == sel
    assert revalidate_coach(sel, []).coach is None
    assert revalidate_coach(ready, COACH_WINDOWS) == ready


def test_random_clicks_never_keep_uncovered_coach(ready):
    """Whatever the click sequence, a coach left in the selection covers the range."""
    rng = random.Random(7)
    sel = select_coach(click_slot(ready, "09:00", []), COACH, COACH_WINDOWS)
    for _ in range(200):
        sel = click_slot(sel, rng.choice(generate_slots()), [], availability=COACH_WINDOWS)
        if sel.coach is not None:
            assert hour_of(sel.start_time) >= 8 and hour_of(sel.end_time) <= 12
        elif sel.start_time and hour_of(sel.start_time) >= 8 and hour_of(sel.end_time) <= 12:
            sel = select_coach(sel, COACH, COACH_WINDOWS)
