# eventhub/schemas/broadcast.py
from pydantic import BaseModel, EmailStr, confloat, conint, constr, field_validator
from datetime import date, time, datetime
from typing import List, Optional

from eventhub.core.timeutils import parse_clock
from eventhub.schemas.booking import PHONE_PATTERN, BookingResponse
from eventhub.schemas.common import Pagination


class BroadcastCreate(BaseModel):
    customer_name: constr(strip_whitespace=True, min_length=2, max_length=100)
    customer_phone: constr(pattern=PHONE_PATTERN)
    customer_email: EmailStr
    event_type: constr(strip_whitespace=True, min_length=2, max_length=100)
    guest_count: conint(ge=1)
    date: date
    time: time
    location: constr(strip_whitespace=True, min_length=5, max_length=500)
    budget: confloat(ge=0)
    requirements: constr(strip_whitespace=True, min_length=10, max_length=2000)

    @field_validator("time", mode="before")
    @classmethod
    def parse_time_of_day(cls, v):
        return parse_clock(v)

    @field_validator("customer_email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class BroadcastResponse(BaseModel):
    id: int
    customer_name: str
    customer_phone: str
    customer_email: str
    event_type: str
    guest_count: int
    date: date
    time: time
    location: str
    budget: float
    requirements: str
    status: str
    accepted_by: Optional[int] = None
    accepted_at: Optional[datetime] = None
    expires_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True


class BroadcastEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    broadcast: BroadcastResponse


class BroadcastListEnvelope(BaseModel):
    success: bool = True
    broadcasts: List[BroadcastResponse]
    pagination: Pagination


class BroadcastAcceptEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    broadcast: BroadcastResponse
    booking: BookingResponse


class BroadcastStats(BaseModel):
    total_open: int
    accepted: int
    completed: int


class BroadcastStatsEnvelope(BaseModel):
    success: bool = True
    stats: BroadcastStats
