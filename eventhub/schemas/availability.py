# eventhub/schemas/availability.py
from pydantic import BaseModel, Field, conint, field_validator
from typing import List, Literal, Optional
from datetime import time, date, datetime

from eventhub.core.timeutils import parse_clock

# "booked" is only ever set by booking confirmation
EditableStatus = Literal["available", "unavailable"]


class WeekendFlags(BaseModel):
    saturday: bool = True
    sunday: bool = True


class TimeSlotIn(BaseModel):
    start_time: time
    end_time: time
    status: EditableStatus = "available"

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time_of_day(cls, v):
        return parse_clock(v)


class TimeSlotResponse(BaseModel):
    id: int
    start_time: time
    end_time: time
    status: str
    booking_id: Optional[int] = None

    class Config:
        from_attributes = True


class AvailabilitySet(BaseModel):
    date: date
    time_slots: List[TimeSlotIn] = Field(default_factory=list)
    is_full_day: bool = False
    status: EditableStatus = "available"
    weekend_availability: Optional[WeekendFlags] = None
    notes: str = ""
    set_all_weekends: bool = Field(False, description="apply to every weekend of this date's month")


class AvailabilityUpdate(BaseModel):
    time_slots: Optional[List[TimeSlotIn]] = None
    is_full_day: Optional[bool] = None
    status: Optional[EditableStatus] = None
    weekend_availability: Optional[WeekendFlags] = None
    notes: Optional[str] = None


class WeekendAvailabilitySet(BaseModel):
    month: conint(ge=1, le=12)
    year: conint(ge=2000, le=9999)
    time_slots: List[TimeSlotIn] = Field(default_factory=list)
    is_full_day: bool = False
    status: EditableStatus = "available"
    notes: str = ""


class AvailabilityResponse(BaseModel):
    id: int
    manager_id: int
    date: date
    is_full_day: bool
    status: str
    time_slots: List[TimeSlotResponse]
    weekend_availability: Optional[WeekendFlags] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailabilityEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    availability: Optional[AvailabilityResponse] = None


class AvailabilityListEnvelope(BaseModel):
    success: bool = True
    availability: List[AvailabilityResponse]


class WeekendOutcome(BaseModel):
    date: date
    success: bool
    availability: Optional[AvailabilityResponse] = None
    code: Optional[str] = None
    message: Optional[str] = None


class WeekendEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    results: List[WeekendOutcome]


class AvailabilityCheckRequest(BaseModel):
    manager_id: int
    date: date
    time: Optional[str] = Field(None, description="HH:MM or HH:MM AM/PM")

    @field_validator("time")
    @classmethod
    def check_time_of_day(cls, v):
        if v is not None:
            parse_clock(v)
        return v


class AvailabilityCheckResponse(BaseModel):
    success: bool = True
    available: bool
    message: str


class CalendarEvent(BaseModel):
    id: int
    title: str
    customer_name: str
    date: date
    time: time
    status: str
    total_amount: float
    location: str


class CalendarEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    availability: List[AvailabilityResponse]
    events: List[CalendarEvent]


class ReconcileEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    records: int
