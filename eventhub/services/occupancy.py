# eventhub/services/occupancy.py
"""
Calendar occupancy as a projection of booking state.

Bookings are the source of truth. Whenever a booking enters or leaves an
occupying status the affected day is recomputed from the bookings that
currently occupy it, instead of being patched slot by slot. The same
projection backs the reconcile job, which can rebuild any range of days.

Slot states: available <-> booked (driven by bookings only),
available <-> unavailable (driven by the manager only).
"""
import logging
from datetime import date, time
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from eventhub.core import config
from eventhub.db.models.availability import Availability, TimeSlot
from eventhub.db.models.booking import Booking

logger = logging.getLogger(__name__)

# bookings that hold calendar space
OCCUPYING_STATUSES = ("Confirmed", "Completed")
# bookings that block deleting a day
LIVE_STATUSES = ("Pending", "Confirmed")


def slot_contains(slot: TimeSlot, at: time) -> bool:
    return slot.start_time <= at <= slot.end_time


def occupying_bookings(db: Session, manager_id: int, day: date) -> List[Booking]:
    # oldest confirmation first, so the latest confirmation ends up holding a contested slot
    return (
        db.query(Booking)
        .filter(
            Booking.manager_id == manager_id,
            Booking.date == day,
            Booking.status.in_(OCCUPYING_STATUSES),
        )
        .order_by(Booking.confirmed_at, Booking.id)
        .all()
    )


def slot_for(record: Availability, at: time) -> Optional[TimeSlot]:
    candidates = [s for s in record.time_slots if s.status != "unavailable" and slot_contains(s, at)]
    if not candidates:
        return None
    # a time on a boundary belongs to the slot that starts there
    for slot in candidates:
        if slot.start_time <= at < slot.end_time:
            return slot
    return candidates[0]


def blocking_holder(
    db: Session,
    booking: Booking,
    record: Optional[Availability],
    mode: Optional[str] = None,
) -> Optional[Booking]:
    """
    The occupying booking that already holds the space `booking` would take.

    Full-day records, days without a record and whole_day mode treat the day
    as one unit; slot-level records in matching mode compare slots.
    """
    mode = mode or config.SLOT_OCCUPANCY_MODE
    others = [b for b in occupying_bookings(db, booking.manager_id, booking.date) if b.id != booking.id]
    if not others:
        return None
    if record is None or record.is_full_day or mode == "whole_day":
        return others[-1]

    wanted = slot_for(record, booking.time)
    if wanted is None:
        return None
    for other in others:
        if slot_for(record, other.time) is wanted:
            return other
    return None


def project_occupancy(record: Availability, bookings: Iterable[Booking], mode: Optional[str] = None) -> None:
    """Recompute day and slot status of one record from the bookings occupying it."""
    mode = mode or config.SLOT_OCCUPANCY_MODE
    bookings = list(bookings)
    holder_ids = {b.id for b in bookings}

    for slot in record.time_slots:
        if slot.status == "booked" and slot.booking_id not in holder_ids:
            slot.status = "available"
            slot.booking_id = None

    if record.is_full_day:
        if bookings:
            record.status = "booked"
        elif record.status == "booked":
            record.status = "available"
        return

    if mode == "whole_day":
        if bookings:
            holder = bookings[-1]
            for slot in record.time_slots:
                slot.status = "booked"
                slot.booking_id = holder.id
            record.status = "booked"
        elif record.status == "booked":
            record.status = "available"
        return

    for booking in bookings:
        slot = slot_for(record, booking.time)
        if slot is None:
            logger.warning(
                f"Booking {booking.id} at {booking.time} matches no open slot on {record.date} (manager {record.manager_id})"
            )
            continue
        if slot.booking_id is not None and slot.booking_id != booking.id:
            logger.warning(f"Slot {slot.id} taken over by booking {booking.id} from booking {slot.booking_id}")
        slot.status = "booked"
        slot.booking_id = booking.id

    has_booked = any(s.status == "booked" for s in record.time_slots)
    has_free = any(s.status == "available" for s in record.time_slots)
    if has_booked and not has_free:
        record.status = "booked"
    elif record.status == "booked":
        record.status = "available"


def sync_day(db: Session, manager_id: int, day: date, mode: Optional[str] = None) -> Optional[Availability]:
    record = (
        db.query(Availability)
        .filter(Availability.manager_id == manager_id, Availability.date == day)
        .first()
    )
    if record is None:
        logger.warning(f"No availability record for manager {manager_id} on {day}; calendar left untouched")
        return None

    project_occupancy(record, occupying_bookings(db, manager_id, day), mode)
    db.commit()
    db.refresh(record)
    return record


def reconcile_calendar(db: Session, manager_id: int, start: date, end: date, mode: Optional[str] = None) -> int:
    """Rebuild occupancy for every record of the manager between start and end (inclusive)."""
    records = (
        db.query(Availability)
        .filter(
            Availability.manager_id == manager_id,
            Availability.date >= start,
            Availability.date <= end,
        )
        .all()
    )
    for record in records:
        project_occupancy(record, occupying_bookings(db, manager_id, record.date), mode)
    db.commit()
    logger.info(f"Reconciled {len(records)} calendar day(s) for manager {manager_id} between {start} and {end}")
    return len(records)
