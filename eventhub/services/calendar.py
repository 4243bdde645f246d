# eventhub/services/calendar.py
import logging
from dataclasses import dataclass
from datetime import date, time
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from eventhub.core.exceptions import BookingPlatformError, Conflict, Locked, NotFound, ValidationFailed
from eventhub.core.timeutils import is_first_of_month, month_bounds, weekend_dates
from eventhub.db.models.availability import Availability, TimeSlot
from eventhub.db.models.booking import Booking
from eventhub.schemas.availability import (
    AvailabilitySet,
    AvailabilityUpdate,
    TimeSlotIn,
    WeekendAvailabilitySet,
    WeekendFlags,
)
from eventhub.services.occupancy import LIVE_STATUSES, occupying_bookings

logger = logging.getLogger(__name__)

# used by the weekend batch when the manager sends no slots
DEFAULT_DAY_SLOT = TimeSlotIn(start_time=time(0, 0), end_time=time(23, 59))


@dataclass
class WeekendResult:
    date: date
    availability: Optional[Availability] = None
    error: Optional[BookingPlatformError] = None

    @property
    def success(self) -> bool:
        return self.error is None


def _ensure_editable(day: date, action: str) -> None:
    if is_first_of_month(day):
        raise Locked(f"Cannot {action} availability for the 1st day of the month")


def _validate_day(is_full_day: bool, slots: Sequence) -> None:
    if not is_full_day and len(slots) == 0:
        raise ValidationFailed(
            "Time slots are required when not full day",
            details=[{"field": "time_slots", "message": "must not be empty when is_full_day is false"}],
        )
    for idx, slot in enumerate(slots):
        if slot.start_time >= slot.end_time:
            raise ValidationFailed(
                "End time must be after start time",
                details=[{"field": f"time_slots[{idx}]", "message": "start_time must be before end_time"}],
            )


def _ensure_not_occupied(db: Session, record: Availability) -> None:
    # days held by confirmed bookings change only through the booking lifecycle
    if occupying_bookings(db, record.manager_id, record.date):
        raise Conflict("Availability is held by confirmed bookings and cannot be modified")


def _build_slots(slots: Sequence[TimeSlotIn]) -> List[TimeSlot]:
    return [TimeSlot(start_time=s.start_time, end_time=s.end_time, status=s.status) for s in slots]


def get_availability(db: Session, manager_id: int, start: Optional[date] = None, end: Optional[date] = None) -> List[Availability]:
    q = db.query(Availability).filter(Availability.manager_id == manager_id)
    if start is not None:
        q = q.filter(Availability.date >= start)
    if end is not None:
        q = q.filter(Availability.date <= end)
    return q.order_by(Availability.date).all()


def get_availability_for_date(db: Session, manager_id: int, day: date) -> Optional[Availability]:
    return (
        db.query(Availability)
        .filter(Availability.manager_id == manager_id, Availability.date == day)
        .first()
    )


def get_availability_by_id(db: Session, manager_id: int, availability_id: int) -> Availability:
    record = (
        db.query(Availability)
        .filter(Availability.id == availability_id, Availability.manager_id == manager_id)
        .first()
    )
    if not record:
        raise NotFound("Availability not found")
    return record


def _apply(record: Availability, *, time_slots, is_full_day, status, weekend, notes) -> None:
    record.time_slots = _build_slots(time_slots)
    record.is_full_day = is_full_day
    record.status = status
    record.weekend_saturday = weekend.saturday if weekend is not None else None
    record.weekend_sunday = weekend.sunday if weekend is not None else None
    record.notes = notes


def _upsert(db: Session, manager_id: int, day: date, *, time_slots, is_full_day, status, weekend, notes) -> Availability:
    _ensure_editable(day, "set")
    _validate_day(is_full_day, time_slots)

    fields = dict(time_slots=time_slots, is_full_day=is_full_day, status=status, weekend=weekend, notes=notes)

    record = get_availability_for_date(db, manager_id, day)
    if record is not None:
        _ensure_not_occupied(db, record)
        _apply(record, **fields)
        db.commit()
        db.refresh(record)
        return record

    record = Availability(manager_id=manager_id, date=day)
    _apply(record, **fields)
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        # another request created the day first; update that record instead
        db.rollback()
        logger.info(f"Concurrent insert for manager {manager_id} on {day}, updating existing record")
        record = get_availability_for_date(db, manager_id, day)
        if record is None:
            raise
        _ensure_not_occupied(db, record)
        _apply(record, **fields)
        db.commit()
    db.refresh(record)
    return record


def set_availability(db: Session, manager_id: int, day: date, payload: AvailabilitySet) -> Availability:
    record = _upsert(
        db,
        manager_id,
        day,
        time_slots=payload.time_slots,
        is_full_day=payload.is_full_day,
        status=payload.status,
        weekend=payload.weekend_availability,
        notes=payload.notes,
    )
    logger.info(f"Availability set for manager {manager_id} on {day} (full_day={record.is_full_day}, status={record.status})")
    return record


def update_availability(db: Session, manager_id: int, availability_id: int, payload: AvailabilityUpdate) -> Availability:
    record = get_availability_by_id(db, manager_id, availability_id)
    _ensure_editable(record.date, "modify")

    time_slots = payload.time_slots
    is_full_day = payload.is_full_day if payload.is_full_day is not None else record.is_full_day
    _validate_day(is_full_day, time_slots if time_slots is not None else record.time_slots)
    _ensure_not_occupied(db, record)

    if time_slots is not None:
        record.time_slots = _build_slots(time_slots)
    record.is_full_day = is_full_day
    if payload.status is not None:
        record.status = payload.status
    if payload.weekend_availability is not None:
        record.weekend_saturday = payload.weekend_availability.saturday
        record.weekend_sunday = payload.weekend_availability.sunday
    if payload.notes is not None:
        record.notes = payload.notes

    db.commit()
    db.refresh(record)
    return record


def set_weekend_availability(db: Session, manager_id: int, month: int, year: int, payload: WeekendAvailabilitySet) -> List[WeekendResult]:
    """
    Apply the same settings to every Saturday and Sunday of the month.
    Each date succeeds or fails on its own; the batch never stops early.
    """
    slots = payload.time_slots or [DEFAULT_DAY_SLOT]
    results = []
    for day in weekend_dates(month, year):
        weekend = WeekendFlags(saturday=day.weekday() == 5, sunday=day.weekday() == 6)
        try:
            record = _upsert(
                db,
                manager_id,
                day,
                time_slots=slots,
                is_full_day=payload.is_full_day,
                status=payload.status,
                weekend=weekend,
                notes=payload.notes,
            )
            results.append(WeekendResult(date=day, availability=record))
        except BookingPlatformError as exc:
            db.rollback()
            logger.warning(f"Weekend availability skipped {day} for manager {manager_id}: {exc.message}")
            results.append(WeekendResult(date=day, error=exc))
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Weekend availability failed on {day} for manager {manager_id}")
            results.append(WeekendResult(date=day, error=BookingPlatformError("Failed to set availability")))

    ok = sum(1 for r in results if r.success)
    logger.info(f"Weekend availability for {month}/{year}: {ok} of {len(results)} dates set (manager {manager_id})")
    return results


def delete_availability(db: Session, manager_id: int, availability_id: int) -> None:
    record = get_availability_by_id(db, manager_id, availability_id)
    _ensure_editable(record.date, "delete")

    live = (
        db.query(Booking.id)
        .filter(
            Booking.manager_id == manager_id,
            Booking.date == record.date,
            Booking.status.in_(LIVE_STATUSES),
        )
        .first()
    )
    if live:
        raise Conflict("Cannot delete availability while pending or confirmed bookings exist on this date")

    db.delete(record)
    db.commit()
    logger.info(f"Availability {availability_id} deleted for manager {manager_id}")


def get_calendar(db: Session, manager_id: int, month: int, year: int):
    """Availability records and live bookings of one month, bookings shaped as display events."""
    start, end = month_bounds(month, year)
    records = get_availability(db, manager_id, start, end)

    bookings = (
        db.query(Booking)
        .filter(
            Booking.manager_id == manager_id,
            Booking.date >= start,
            Booking.date <= end,
            Booking.status.in_(LIVE_STATUSES),
        )
        .order_by(Booking.date, Booking.time)
        .all()
    )
    events = [
        {
            "id": b.id,
            "title": f"{b.event_type} - {b.customer_name}",
            "customer_name": b.customer_name,
            "date": b.date,
            "time": b.time,
            "status": b.status,
            "total_amount": b.total_amount,
            "location": b.location,
        }
        for b in bookings
    ]
    return records, events
