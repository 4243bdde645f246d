# eventhub/api/routes/bookings.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.core.config import DEFAULT_PAGE_SIZE
from eventhub.core.security import get_current_manager
from eventhub.db.base import get_db
from eventhub.db.models.manager import EventManager
from eventhub.schemas.booking import (
    BookingAnalyticsEnvelope,
    BookingCreate,
    BookingEnvelope,
    BookingListEnvelope,
    BookingStatsEnvelope,
    BookingStatus,
    BookingStatusUpdate,
    CompletedBookingsEnvelope,
)
from eventhub.schemas.common import paginate
from eventhub.services import bookings as booking_service

router = APIRouter(prefix="/bookings", tags=["bookings"])


# Dashboard endpoints are declared before /{booking_id}

@router.get("/stats/dashboard", response_model=BookingStatsEnvelope)
def booking_stats(
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    return BookingStatsEnvelope(stats=booking_service.booking_stats(db, current_manager.id))


@router.get("/analytics/dashboard", response_model=BookingAnalyticsEnvelope)
def booking_analytics(
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    return BookingAnalyticsEnvelope(analytics=booking_service.booking_analytics(db, current_manager.id))


@router.get("/completed/recent", response_model=CompletedBookingsEnvelope)
def recent_completed(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    orders = booking_service.recent_completed(db, current_manager.id, limit)
    return CompletedBookingsEnvelope(completed_orders=orders)


@router.get("/", response_model=BookingListEnvelope)
def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    items, total = booking_service.list_bookings(db, current_manager.id, status_filter, page, limit)
    return BookingListEnvelope(bookings=items, pagination=paginate(page, limit, total))


@router.post("/", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    booking = booking_service.create_booking(db, current_manager.id, payload)
    return BookingEnvelope(message="Booking created successfully", booking=booking)


@router.get("/{booking_id}", response_model=BookingEnvelope)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    return BookingEnvelope(booking=booking_service.get_booking(db, current_manager.id, booking_id))


@router.put("/{booking_id}/status", response_model=BookingEnvelope)
def update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    booking = booking_service.update_status(db, current_manager.id, booking_id, payload.status)
    return BookingEnvelope(message=f"Booking {booking.status.lower()} successfully", booking=booking)
