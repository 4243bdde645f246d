# eventhub/api/routes/reviews.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.core.config import DEFAULT_PAGE_SIZE
from eventhub.core.security import get_current_manager
from eventhub.db.base import get_db
from eventhub.db.models.manager import EventManager
from eventhub.schemas.common import paginate
from eventhub.schemas.review import (
    RatingSummary,
    ReviewCreate,
    ReviewEnvelope,
    ReviewListEnvelope,
    ReviewStatsEnvelope,
)
from eventhub.services import reviews as review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/stats/dashboard", response_model=ReviewStatsEnvelope)
def review_stats(
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    return ReviewStatsEnvelope(stats=review_service.review_stats(db, current_manager.id))


@router.get("/", response_model=ReviewListEnvelope)
def list_reviews(
    rating: Optional[int] = Query(None, ge=1, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    items, total, summary = review_service.list_reviews(db, current_manager.id, rating, page, limit)
    return ReviewListEnvelope(
        reviews=items,
        pagination=paginate(page, limit, total),
        stats=RatingSummary(**summary),
    )


# Customers review without an account
@router.post("/", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
def create_review(payload: ReviewCreate, db: Session = Depends(get_db)):
    review = review_service.create_review(db, payload)
    return ReviewEnvelope(message="Review submitted successfully", review=review)
