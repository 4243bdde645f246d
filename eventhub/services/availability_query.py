# eventhub/services/availability_query.py
import logging
from datetime import date
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from eventhub.core.exceptions import ValidationFailed
from eventhub.core.timeutils import parse_clock
from eventhub.services.calendar import get_availability_for_date
from eventhub.services.occupancy import occupying_bookings, slot_contains, slot_for

logger = logging.getLogger(__name__)


def check_availability(db: Session, manager_id: int, day: date, at: Optional[str] = None) -> Tuple[bool, str]:
    """
    Is the manager free on `day` (and at `at`, when given)?

    Calendar status is checked against the bookings that actually occupy the
    day, since calendar sync after a status change is only best effort.
    """
    record = get_availability_for_date(db, manager_id, day)
    if record is None:
        return False, "No availability set for this date"

    if record.status != "available":
        return False, f"Date is marked as {record.status}"

    holders = occupying_bookings(db, manager_id, day)

    if record.is_full_day:
        if holders:
            logger.warning(f"Calendar drift: full day {day} of manager {manager_id} reads available but is booked")
            return False, "Date is already booked"
        return True, "Available full day"

    if at is None:
        return True, "Available"

    try:
        wanted = parse_clock(at)
    except ValueError as exc:
        raise ValidationFailed(str(exc), details=[{"field": "time", "message": str(exc)}])

    for slot in record.time_slots:
        if slot.status != "available" or not slot_contains(slot, wanted):
            continue
        if any(slot_for(record, b.time) is slot for b in holders):
            logger.warning(f"Calendar drift: slot {slot.id} reads available but a booking occupies it")
            continue
        return True, "Time slot available"
    return False, "Time slot not available"
