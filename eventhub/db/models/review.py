# eventhub/db/models/review.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, func
from sqlalchemy.orm import relationship
from eventhub.db.base import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True)
    manager_id = Column(Integer, ForeignKey("event_managers.id", ondelete="CASCADE"), nullable=False, index=True)

    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String, nullable=False)
    rating = Column(Integer, nullable=False)   # 1..5
    comment = Column(String(1000), nullable=False)
    event_type = Column(String, nullable=False)

    is_verified = Column(Boolean, default=False)
    is_public = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    booking = relationship("Booking", foreign_keys=[booking_id])
