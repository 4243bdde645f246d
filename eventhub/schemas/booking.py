# eventhub/schemas/booking.py
from pydantic import BaseModel, EmailStr, Field, confloat, constr, field_validator
from datetime import date, time, datetime
from typing import List, Literal, Optional

from eventhub.core.timeutils import parse_clock
from eventhub.schemas.common import Pagination

PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"

BookingStatus = Literal["Pending", "Confirmed", "Cancelled", "Completed"]


# --- CREATE ---
class BookingDraft(BaseModel):
    """Booking fields as the lifecycle manager receives them; services may be empty."""
    customer_name: constr(strip_whitespace=True, min_length=2, max_length=100)
    customer_phone: constr(pattern=PHONE_PATTERN)
    customer_email: EmailStr
    event_type: constr(strip_whitespace=True, min_length=2, max_length=100)
    date: date
    time: time
    location: constr(strip_whitespace=True, min_length=5, max_length=500)
    service_ids: List[int] = Field(default_factory=list)
    total_amount: confloat(ge=0)
    notes: Optional[constr(max_length=1000)] = None

    @field_validator("time", mode="before")
    @classmethod
    def parse_time_of_day(cls, v):
        return parse_clock(v)

    @field_validator("customer_email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class BookingCreate(BookingDraft):
    service_ids: List[int] = Field(..., min_length=1, description="At least one service must be selected")


# --- STATUS UPDATE (Manager) ---
class BookingStatusUpdate(BaseModel):
    status: BookingStatus = Field(..., description="Allowed values: Pending, Confirmed, Cancelled, Completed")


# --- RESPONSE ---
class BookingResponse(BaseModel):
    id: int
    customer_name: str
    customer_phone: str
    customer_email: str
    event_type: str
    date: date
    time: time
    location: str
    manager_id: int
    service_ids: List[int]
    total_amount: float
    notes: Optional[str] = None
    status: str
    payment_status: str
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    booking: BookingResponse


class BookingListEnvelope(BaseModel):
    success: bool = True
    bookings: List[BookingResponse]
    pagination: Pagination


class CompletedBookingsEnvelope(BaseModel):
    success: bool = True
    completed_orders: List[BookingResponse]


class BookingStats(BaseModel):
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    completed_bookings: int
    cancelled_bookings: int
    todays_events: int
    monthly_revenue: float


class BookingStatsEnvelope(BaseModel):
    success: bool = True
    stats: BookingStats


class WeekdayPerformance(BaseModel):
    day: int  # 0 = Sunday
    day_name: str
    bookings: int
    revenue: float


class BookingAnalytics(BaseModel):
    total_revenue: float
    weekly_revenue: float
    monthly_revenue: float
    total_bookings: int
    weekly_bookings: int
    monthly_bookings: int
    completed_orders: int
    pending_orders: int
    completion_rate: float
    weekly_performance: List[WeekdayPerformance]


class BookingAnalyticsEnvelope(BaseModel):
    success: bool = True
    analytics: BookingAnalytics
