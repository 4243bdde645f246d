# eventhub/schemas/review.py
from pydantic import BaseModel, EmailStr, Field, conint, constr
from typing import List, Optional
from datetime import datetime

from eventhub.schemas.common import Pagination


class ReviewCreate(BaseModel):
    booking_id: int
    customer_name: constr(strip_whitespace=True, min_length=2, max_length=100)
    customer_email: EmailStr
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: constr(strip_whitespace=True, min_length=10, max_length=1000)


class ReviewResponse(BaseModel):
    id: int
    booking_id: int
    manager_id: int
    customer_name: str
    customer_email: str
    rating: int
    comment: str
    event_type: str
    is_verified: bool
    is_public: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReviewEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    review: ReviewResponse


class RatingSummary(BaseModel):
    average_rating: float
    total_reviews: int


class ReviewListEnvelope(BaseModel):
    success: bool = True
    reviews: List[ReviewResponse]
    pagination: Pagination
    stats: RatingSummary


class ReviewStats(BaseModel):
    average_rating: float
    total_reviews: int
    five_stars: int
    four_stars: int
    three_stars: int
    two_stars: int
    one_star: int
    customer_satisfaction: float  # percent of 4 and 5 star reviews


class ReviewStatsEnvelope(BaseModel):
    success: bool = True
    stats: ReviewStats
