# eventhub/services/reviews.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.core.exceptions import Conflict, NotFound, ValidationFailed
from eventhub.db.models.booking import Booking
from eventhub.db.models.manager import EventManager
from eventhub.db.models.review import Review
from eventhub.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)


# Helper: recalc manager aggregates
def _recalculate_manager_rating(db: Session, manager_id: int):
    manager = db.query(EventManager).filter(EventManager.id == manager_id).first()
    if not manager:
        return
    rows = db.query(Review).filter(Review.manager_id == manager_id, Review.is_public == True).all()
    total = len(rows)
    if total == 0:
        manager.avg_rating = 0.0
        manager.rating_count = 0
    else:
        s = sum(r.rating for r in rows)
        manager.avg_rating = float(s) / total
        manager.rating_count = total
    db.add(manager)
    db.commit()


def create_review(db: Session, payload: ReviewCreate) -> Review:
    booking = db.query(Booking).filter(Booking.id == payload.booking_id).first()
    if not booking:
        raise NotFound("Booking not found")

    if booking.status != "Completed":
        raise ValidationFailed(
            "Can only review completed bookings",
            details=[{"field": "booking_id", "message": "booking is not completed"}],
        )

    # one review per booking (db unique + check)
    existing = db.query(Review).filter(Review.booking_id == payload.booking_id).first()
    if existing:
        raise Conflict("Review already exists for this booking")

    review = Review(
        booking_id=booking.id,
        manager_id=booking.manager_id,
        customer_name=payload.customer_name,
        customer_email=payload.customer_email.lower(),
        rating=payload.rating,
        comment=payload.comment,
        event_type=booking.event_type,
        is_verified=True,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Review already exists for this booking")
    db.refresh(review)

    _recalculate_manager_rating(db, booking.manager_id)
    db.refresh(review)
    logger.info(f"Review {review.id} added for manager {review.manager_id} (rating {review.rating})")
    return review


def _public_reviews(db: Session, manager_id: int):
    return db.query(Review).filter(Review.manager_id == manager_id, Review.is_public == True)


def list_reviews(
    db: Session,
    manager_id: int,
    rating: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Review], int, dict]:
    q = _public_reviews(db, manager_id)
    if rating:
        q = q.filter(Review.rating == rating)
    total = q.count()
    reviews = q.order_by(Review.created_at.desc(), Review.id.desc()).offset((page - 1) * limit).limit(limit).all()

    avg_rating, total_reviews = (
        _public_reviews(db, manager_id)
        .with_entities(func.avg(Review.rating), func.count(Review.id))
        .one()
    )
    summary = {
        "average_rating": float(avg_rating) if avg_rating is not None else 0.0,
        "total_reviews": int(total_reviews or 0),
    }
    return reviews, total, summary


def review_stats(db: Session, manager_id: int) -> dict:
    def stars(n):
        return func.coalesce(func.sum(case((Review.rating == n, 1), else_=0)), 0)

    row = (
        _public_reviews(db, manager_id)
        .with_entities(
            func.avg(Review.rating),
            func.count(Review.id),
            stars(5),
            stars(4),
            stars(3),
            stars(2),
            stars(1),
        )
        .one()
    )
    avg_rating, total, five, four, three, two, one = row
    total = int(total or 0)
    satisfied = int(five) + int(four)
    satisfaction = round(satisfied / total * 100, 1) if total > 0 else 0.0

    return {
        "average_rating": float(avg_rating) if avg_rating is not None else 0.0,
        "total_reviews": total,
        "five_stars": int(five),
        "four_stars": int(four),
        "three_stars": int(three),
        "two_stars": int(two),
        "one_star": int(one),
        "customer_satisfaction": satisfaction,
    }
