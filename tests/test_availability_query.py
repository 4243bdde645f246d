from datetime import time

import pytest

from conftest import future_day, set_full_day, set_slots, slot
from eventhub.core.exceptions import ValidationFailed
from eventhub.db.models.booking import Booking
from eventhub.schemas.availability import AvailabilitySet
from eventhub.services import calendar
from eventhub.services.availability_query import check_availability


def test_no_record_means_not_available(db, manager):
    available, message = check_availability(db, manager.id, future_day())
    assert available is False
    assert message == "No availability set for this date"


def test_day_marked_unavailable(db, manager):
    day = future_day()
    calendar.set_availability(db, manager.id, day, AvailabilitySet(date=day, is_full_day=True, status="unavailable"))
    available, message = check_availability(db, manager.id, day, "10:00")
    assert available is False
    assert "unavailable" in message


def test_full_day_ignores_requested_time(db, manager):
    day = future_day()
    set_full_day(db, manager.id, day)
    assert check_availability(db, manager.id, day, "03:00") == (True, "Available full day")


@pytest.mark.parametrize(
    "at,expected",
    [
        ("10:00", True),
        ("2:00 PM", True),
        ("14:00:00", True),
        ("9:59", False),
        ("15:00", False),
        ("04:30 PM", True),
    ],
)
def test_slot_bounds_are_inclusive(db, manager, at, expected):
    day = future_day()
    set_slots(db, manager.id, day, slot(time(10), time(14)), slot(time(16), time(18)))
    assert check_availability(db, manager.id, day, at)[0] is expected


def test_unavailable_slot_is_skipped(db, manager):
    day = future_day()
    set_slots(db, manager.id, day, slot(time(10), time(14), "unavailable"))
    assert check_availability(db, manager.id, day, "11:00") == (False, "Time slot not available")


def test_without_time_uses_day_status(db, manager):
    day = future_day()
    set_slots(db, manager.id, day, slot(time(10), time(14)))
    assert check_availability(db, manager.id, day) == (True, "Available")


def test_invalid_time_is_rejected(db, manager):
    day = future_day()
    set_slots(db, manager.id, day, slot(time(10), time(14)))
    with pytest.raises(ValidationFailed):
        check_availability(db, manager.id, day, "25:61")


def test_occupying_booking_wins_over_stale_slot(db, manager):
    day = future_day()
    set_slots(db, manager.id, day, slot(time(10), time(14)), slot(time(16), time(18)))
    # confirmed without going through the lifecycle, so the calendar never heard of it
    db.add(
        Booking(
            customer_name="Asha Rao",
            customer_phone="+919812345678",
            customer_email="asha@example.com",
            event_type="Wedding",
            date=day,
            time=time(12, 0),
            location="Palace Grounds, Bengaluru",
            manager_id=manager.id,
            total_amount=1000,
            status="Confirmed",
        )
    )
    db.commit()

    assert check_availability(db, manager.id, day, "11:00")[0] is False
    assert check_availability(db, manager.id, day, "17:00")[0] is True
