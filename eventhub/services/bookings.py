# eventhub/services/bookings.py
"""
Booking lifecycle.

    Pending -> Confirmed -> Completed
    Pending | Confirmed -> Cancelled

Completed and Cancelled are terminal. Confirming re-checks the calendar: a
booking cannot take a day or slot another booking already holds. Confirming a
booking, or cancelling a confirmed one, re-projects the calendar day it sits
on. The status change is committed first and always stands. Calendar sync is
best effort and only logs when it fails; the reconcile job can repair the day
later.
"""
import logging
from datetime import datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import extract, func
from sqlalchemy.orm import Session

from eventhub.core import config
from eventhub.core.exceptions import InvalidServices, InvalidTransition, NotFound, Unavailable, ValidationFailed
from eventhub.core.timeutils import today, utcnow
from eventhub.db.models.availability import Availability
from eventhub.db.models.booking import Booking
from eventhub.db.models.service import Service
from eventhub.schemas.booking import BookingDraft
from eventhub.services.occupancy import blocking_holder, slot_for, sync_day

logger = logging.getLogger(__name__)

TRANSITIONS = {
    "Pending": {"Confirmed", "Cancelled"},
    "Confirmed": {"Completed", "Cancelled"},
    "Cancelled": set(),
    "Completed": set(),
}


def can_transition(current: str, new: str) -> bool:
    return new in TRANSITIONS.get(current, set())


def _resolve_services(db: Session, manager_id: int, service_ids: List[int]) -> List[Service]:
    wanted = set(service_ids)
    if not wanted:
        return []
    services = (
        db.query(Service)
        .filter(
            Service.id.in_(wanted),
            Service.manager_id == manager_id,
            Service.is_active == True,
        )
        .all()
    )
    if len(services) != len(wanted):
        raise InvalidServices(requested=len(wanted), matched=len(services))
    return services


def create_booking(
    db: Session,
    manager_id: int,
    payload: BookingDraft,
    *,
    from_broadcast: bool = False,
    commit: bool = True,
) -> Booking:
    """
    Create a Pending booking for the manager.

    Direct bookings need a future date and an `available` calendar day.
    Bookings derived from an accepted broadcast skip both checks: the
    customer asked first and the manager has no slot for them yet.
    The slot itself is not reserved here, confirmation does that.
    """
    services = _resolve_services(db, manager_id, payload.service_ids)

    if not from_broadcast:
        if payload.date <= today():
            raise ValidationFailed(
                "Event date must be in the future",
                details=[{"field": "date", "message": "must be in the future"}],
            )

        availability = (
            db.query(Availability)
            .filter(Availability.manager_id == manager_id, Availability.date == payload.date)
            .first()
        )
        if not availability or availability.status != "available":
            raise Unavailable("Manager is not available on the selected date")

    booking = Booking(
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        customer_email=payload.customer_email,
        event_type=payload.event_type,
        date=payload.date,
        time=payload.time,
        location=payload.location,
        manager_id=manager_id,
        total_amount=float(payload.total_amount),
        notes=payload.notes,
        status="Pending",
    )
    booking.services = services
    db.add(booking)

    if commit:
        db.commit()
        db.refresh(booking)
        logger.info(f"Booking {booking.id} created for manager {manager_id} on {booking.date}")
    else:
        db.flush()
    return booking


def get_booking(db: Session, manager_id: int, booking_id: int) -> Booking:
    booking = (
        db.query(Booking)
        .filter(Booking.id == booking_id, Booking.manager_id == manager_id)
        .first()
    )
    if not booking:
        raise NotFound("Booking not found")
    return booking


def list_bookings(
    db: Session,
    manager_id: int,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Booking], int]:
    q = db.query(Booking).filter(Booking.manager_id == manager_id)
    if status:
        q = q.filter(Booking.status == status)
    total = q.count()
    bookings = q.order_by(Booking.created_at.desc(), Booking.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return bookings, total


def _sync_calendar(db: Session, booking: Booking) -> None:
    manager_id, day, booking_id = booking.manager_id, booking.date, booking.id
    try:
        sync_day(db, manager_id, day)
    except Exception:
        db.rollback()
        logger.exception(f"Calendar sync failed for booking {booking_id} (manager {manager_id}, {day}); booking status kept")


def _ensure_confirmable(db: Session, booking: Booking) -> None:
    """Re-check the calendar space a booking is about to occupy."""
    record = (
        db.query(Availability)
        .filter(Availability.manager_id == booking.manager_id, Availability.date == booking.date)
        .first()
    )
    if record is not None:
        if record.status == "unavailable":
            raise Unavailable("Manager is not available on the selected date")
        if (
            not record.is_full_day
            and config.SLOT_OCCUPANCY_MODE == "matching"
            and slot_for(record, booking.time) is None
        ):
            raise Unavailable("No open time slot covers the booking time")

    holder = blocking_holder(db, booking, record)
    if holder is not None:
        logger.warning(f"Booking {booking.id} cannot be confirmed: booking {holder.id} already holds {booking.date}")
        raise Unavailable("The selected date or time slot is already booked")


def update_status(db: Session, manager_id: int, booking_id: int, new_status: str) -> Booking:
    booking = get_booking(db, manager_id, booking_id)
    old_status = booking.status

    if not can_transition(old_status, new_status):
        raise InvalidTransition(old_status, new_status)

    now = utcnow()
    values = {"status": new_status, "updated_at": now}
    if new_status == "Confirmed":
        _ensure_confirmable(db, booking)
        values["confirmed_at"] = now

    # compare-and-set on the current status so two concurrent updates cannot both pass validation
    updated = (
        db.query(Booking)
        .filter(Booking.id == booking.id, Booking.status == old_status)
        .update(values, synchronize_session=False)
    )
    if updated != 1:
        db.rollback()
        db.refresh(booking)
        raise InvalidTransition(booking.status, new_status)
    db.commit()
    db.refresh(booking)
    logger.info(f"Booking {booking.id} moved {old_status} -> {new_status}")

    if new_status == "Confirmed" or (new_status == "Cancelled" and old_status == "Confirmed"):
        _sync_calendar(db, booking)
        db.refresh(booking)

    return booking


def booking_stats(db: Session, manager_id: int) -> dict:
    def count(*criteria):
        return db.query(func.count(Booking.id)).filter(Booking.manager_id == manager_id, *criteria).scalar() or 0

    now = utcnow()
    start_of_month = datetime(now.year, now.month, 1)

    monthly_revenue = db.query(func.coalesce(func.sum(Booking.total_amount), 0)).filter(
        Booking.manager_id == manager_id,
        Booking.status.in_(("Confirmed", "Completed")),
        Booking.created_at >= start_of_month,
    ).scalar() or 0.0

    return {
        "total_bookings": int(count()),
        "pending_bookings": int(count(Booking.status == "Pending")),
        "confirmed_bookings": int(count(Booking.status == "Confirmed")),
        "completed_bookings": int(count(Booking.status == "Completed")),
        "cancelled_bookings": int(count(Booking.status == "Cancelled")),
        "todays_events": int(count(Booking.date == today(), Booking.status.in_(("Confirmed", "Completed")))),
        "monthly_revenue": float(monthly_revenue),
    }


WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def booking_analytics(db: Session, manager_id: int, now: Optional[datetime] = None) -> dict:
    """Revenue and volume of Confirmed/Completed bookings, overall, this week (from Sunday) and this month."""
    now = now or utcnow()
    start_of_week = datetime.combine(now.date() - timedelta(days=(now.weekday() + 1) % 7), time.min)
    start_of_month = datetime(now.year, now.month, 1)

    def totals(*criteria):
        revenue, count = db.query(
            func.coalesce(func.sum(Booking.total_amount), 0),
            func.count(Booking.id),
        ).filter(
            Booking.manager_id == manager_id,
            Booking.status.in_(("Confirmed", "Completed")),
            *criteria,
        ).one()
        return float(revenue or 0), int(count or 0)

    total_revenue, total_bookings = totals()
    weekly_revenue, weekly_bookings = totals(Booking.created_at >= start_of_week)
    monthly_revenue, monthly_bookings = totals(Booking.created_at >= start_of_month)

    def count(status):
        return db.query(func.count(Booking.id)).filter(Booking.manager_id == manager_id, Booking.status == status).scalar() or 0

    completed_orders = int(count("Completed"))
    pending_orders = int(count("Pending"))
    completion_rate = round(completed_orders / total_bookings * 100, 1) if total_bookings > 0 else 0.0

    # 0 = Sunday
    weekday = extract("dow", Booking.created_at)
    rows = (
        db.query(weekday, func.count(Booking.id), func.coalesce(func.sum(Booking.total_amount), 0))
        .filter(
            Booking.manager_id == manager_id,
            Booking.status.in_(("Confirmed", "Completed")),
            Booking.created_at >= start_of_week,
        )
        .group_by(weekday)
        .order_by(weekday)
        .all()
    )
    weekly_performance = [
        {"day": int(day), "day_name": WEEKDAY_NAMES[int(day)], "bookings": int(n), "revenue": float(revenue)}
        for day, n, revenue in rows
    ]

    return {
        "total_revenue": total_revenue,
        "weekly_revenue": weekly_revenue,
        "monthly_revenue": monthly_revenue,
        "total_bookings": total_bookings,
        "weekly_bookings": weekly_bookings,
        "monthly_bookings": monthly_bookings,
        "completed_orders": completed_orders,
        "pending_orders": pending_orders,
        "completion_rate": completion_rate,
        "weekly_performance": weekly_performance,
    }


def recent_completed(db: Session, manager_id: int, limit: int = 10) -> List[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.manager_id == manager_id, Booking.status == "Completed")
        .order_by(Booking.updated_at.desc())
        .limit(limit)
        .all()
    )
