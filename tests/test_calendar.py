from datetime import date, time

import pytest

from conftest import book, future_day, set_full_day, set_slots, slot
from eventhub.core.exceptions import Conflict, Locked, NotFound, ValidationFailed
from eventhub.core.timeutils import weekend_dates
from eventhub.db.models.availability import Availability
from eventhub.schemas.availability import AvailabilitySet, AvailabilityUpdate, WeekendAvailabilitySet
from eventhub.services import bookings as booking_service
from eventhub.services import calendar


def test_set_availability_keeps_one_record_per_day(db, manager):
    day = future_day()
    first = set_slots(db, manager.id, day, slot(time(10), time(14)))
    second = calendar.set_availability(
        db,
        manager.id,
        day,
        AvailabilitySet(date=day, time_slots=[slot(time(9), time(12)), slot(time(15), time(18))], notes="updated"),
    )

    assert second.id == first.id
    assert db.query(Availability).filter(Availability.manager_id == manager.id, Availability.date == day).count() == 1
    assert second.notes == "updated"
    assert [(s.start_time, s.end_time) for s in second.time_slots] == [(time(9), time(12)), (time(15), time(18))]


def test_different_managers_get_their_own_records(db, make_manager):
    day = future_day()
    a, b = make_manager(), make_manager("Meera Planners")
    set_full_day(db, a.id, day)
    set_full_day(db, b.id, day)
    assert db.query(Availability).filter(Availability.date == day).count() == 2


def test_first_of_month_is_locked(db, manager):
    day = future_day(month=8, day=1)
    with pytest.raises(Locked):
        set_full_day(db, manager.id, day)
    assert db.query(Availability).count() == 0


def test_empty_slots_without_full_day_is_rejected(db, manager):
    day = future_day()
    with pytest.raises(ValidationFailed):
        calendar.set_availability(db, manager.id, day, AvailabilitySet(date=day, time_slots=[], is_full_day=False))


def test_slot_must_end_after_it_starts(db, manager):
    day = future_day()
    with pytest.raises(ValidationFailed) as exc:
        set_slots(db, manager.id, day, slot(time(14), time(10)))
    assert exc.value.details[0]["field"] == "time_slots[0]"


def test_full_day_record_needs_no_slots(db, manager):
    record = set_full_day(db, manager.id, future_day())
    assert record.is_full_day is True
    assert record.status == "available"
    assert record.time_slots == []


def test_update_availability_changes_only_given_fields(db, manager):
    day = future_day()
    record = set_slots(db, manager.id, day, slot(time(10), time(14)))

    updated = calendar.update_availability(db, manager.id, record.id, AvailabilityUpdate(status="unavailable"))

    assert updated.status == "unavailable"
    assert len(updated.time_slots) == 1


def test_update_unknown_availability_is_not_found(db, manager):
    with pytest.raises(NotFound):
        calendar.update_availability(db, manager.id, 999, AvailabilityUpdate(notes="x"))


def test_day_held_by_confirmed_booking_cannot_be_changed(db, manager, service):
    day = future_day()
    record = set_full_day(db, manager.id, day)
    booking = book(db, manager.id, day, service.id)
    booking_service.update_status(db, manager.id, booking.id, "Confirmed")

    with pytest.raises(Conflict):
        calendar.update_availability(db, manager.id, record.id, AvailabilityUpdate(status="available"))
    with pytest.raises(Conflict):
        set_full_day(db, manager.id, day)


def test_delete_blocked_by_live_booking(db, manager, service):
    day = future_day()
    record = set_full_day(db, manager.id, day)
    booking = book(db, manager.id, day, service.id)

    with pytest.raises(Conflict):
        calendar.delete_availability(db, manager.id, record.id)

    booking_service.update_status(db, manager.id, booking.id, "Cancelled")
    calendar.delete_availability(db, manager.id, record.id)
    assert calendar.get_availability_for_date(db, manager.id, day) is None


def test_delete_on_first_of_month_is_locked(db, manager):
    day = future_day(month=9, day=1)
    record = Availability(manager_id=manager.id, date=day, is_full_day=True, status="available")
    db.add(record)
    db.commit()

    with pytest.raises(Locked):
        calendar.delete_availability(db, manager.id, record.id)


def test_weekend_batch_skips_first_and_reports_each_date(db, manager, service):
    year = future_day().year
    weekends = weekend_dates(7, year)
    held = weekends[0]

    set_full_day(db, manager.id, held)
    booking = book(db, manager.id, held, service.id)
    booking_service.update_status(db, manager.id, booking.id, "Confirmed")

    results = calendar.set_weekend_availability(
        db, manager.id, 7, year, WeekendAvailabilitySet(month=7, year=year)
    )

    assert [r.date for r in results] == weekends
    assert all(r.date.day != 1 for r in results)
    failed = [r for r in results if not r.success]
    assert [r.date for r in failed] == [held]
    assert isinstance(failed[0].error, Conflict)

    for r in results[1:]:
        assert r.availability.time_slots[0].start_time == time(0, 0)
        assert r.availability.time_slots[0].end_time == time(23, 59)
        assert r.availability.weekend_saturday == (r.date.weekday() == 5)
        assert r.availability.weekend_sunday == (r.date.weekday() == 6)


def test_weekend_dates_never_include_the_first():
    # August 2026 starts on a Saturday
    dates = weekend_dates(8, 2026)
    assert date(2026, 8, 1) not in dates
    assert dates[0] == date(2026, 8, 2)
    assert all(d.weekday() in (5, 6) for d in dates)


def test_calendar_lists_live_bookings_as_events(db, manager, service):
    day = future_day()
    set_full_day(db, manager.id, day)
    live = book(db, manager.id, day, service.id)
    cancelled = book(db, manager.id, day, service.id, customer_name="Kiran Shah", event_type="Birthday")
    booking_service.update_status(db, manager.id, cancelled.id, "Cancelled")

    records, events = calendar.get_calendar(db, manager.id, day.month, day.year)

    assert [r.date for r in records] == [day]
    assert [e["id"] for e in events] == [live.id]
    assert events[0]["title"] == "Wedding - Asha Rao"
