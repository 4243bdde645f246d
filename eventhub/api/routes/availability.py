# eventhub/api/routes/availability.py
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from eventhub.core.security import get_current_manager
from eventhub.core.timeutils import month_bounds, today
from eventhub.db.base import get_db
from eventhub.db.models.manager import EventManager
from eventhub.schemas.availability import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    AvailabilityEnvelope,
    AvailabilityListEnvelope,
    AvailabilitySet,
    AvailabilityUpdate,
    CalendarEnvelope,
    ReconcileEnvelope,
    WeekendAvailabilitySet,
    WeekendEnvelope,
    WeekendOutcome,
)
from eventhub.schemas.common import MessageResponse
from eventhub.services import calendar
from eventhub.services.availability_query import check_availability
from eventhub.services.occupancy import reconcile_calendar

router = APIRouter(prefix="/availability", tags=["availability"])


def _weekend_envelope(month: int, year: int, results) -> WeekendEnvelope:
    outcomes = [
        WeekendOutcome(
            date=r.date,
            success=r.success,
            availability=r.availability,
            code=r.error.code if r.error else None,
            message=r.error.message if r.error else None,
        )
        for r in results
    ]
    ok = sum(1 for r in results if r.success)
    return WeekendEnvelope(
        message=f"Availability set for {ok} of {len(results)} weekend dates in {month}/{year}",
        results=outcomes,
    )


@router.get("/", response_model=AvailabilityListEnvelope)
def list_availability(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=9999),
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    start = end = None
    if month and year:
        start, end = month_bounds(month, year)
    records = calendar.get_availability(db, current_manager.id, start, end)
    return AvailabilityListEnvelope(availability=records)


@router.get("/calendar/{month}/{year}", response_model=CalendarEnvelope)
def get_calendar(
    month: int = Path(..., ge=1, le=12),
    year: int = Path(..., ge=2000, le=9999),
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    records, events = calendar.get_calendar(db, current_manager.id, month, year)
    return CalendarEnvelope(availability=records, events=events)


# Public: customers check a manager before booking
@router.post("/check", response_model=AvailabilityCheckResponse)
def check(payload: AvailabilityCheckRequest, db: Session = Depends(get_db)):
    available, message = check_availability(db, payload.manager_id, payload.date, payload.time)
    return AvailabilityCheckResponse(available=available, message=message)


@router.post("/reconcile", response_model=ReconcileEnvelope)
def reconcile(
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    start = start or today()
    end = end or start + timedelta(days=365)
    count = reconcile_calendar(db, current_manager.id, start, end)
    return ReconcileEnvelope(message=f"Reconciled {count} calendar day(s)", records=count)


@router.post("/weekends", response_model=WeekendEnvelope)
def set_weekends(
    payload: WeekendAvailabilitySet,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    results = calendar.set_weekend_availability(db, current_manager.id, payload.month, payload.year, payload)
    return _weekend_envelope(payload.month, payload.year, results)


@router.get("/{day}", response_model=AvailabilityEnvelope)
def get_for_date(
    day: date,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    record = calendar.get_availability_for_date(db, current_manager.id, day)
    if record is None:
        return AvailabilityEnvelope(message="No availability set for this date")
    return AvailabilityEnvelope(availability=record)


# returns WeekendEnvelope when set_all_weekends is true, AvailabilityEnvelope otherwise
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=None)
def set_availability(
    payload: AvailabilitySet,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    if payload.set_all_weekends:
        weekend = WeekendAvailabilitySet(
            month=payload.date.month,
            year=payload.date.year,
            time_slots=payload.time_slots,
            is_full_day=payload.is_full_day,
            status=payload.status,
            notes=payload.notes,
        )
        results = calendar.set_weekend_availability(db, current_manager.id, weekend.month, weekend.year, weekend)
        return _weekend_envelope(weekend.month, weekend.year, results)

    record = calendar.set_availability(db, current_manager.id, payload.date, payload)
    return AvailabilityEnvelope(message="Availability set successfully", availability=record)


@router.put("/{availability_id}", response_model=AvailabilityEnvelope)
def update_availability(
    availability_id: int,
    payload: AvailabilityUpdate,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    record = calendar.update_availability(db, current_manager.id, availability_id, payload)
    return AvailabilityEnvelope(message="Availability updated successfully", availability=record)


@router.delete("/{availability_id}", response_model=MessageResponse)
def delete_availability(
    availability_id: int,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    calendar.delete_availability(db, current_manager.id, availability_id)
    return MessageResponse(message="Availability deleted successfully")
