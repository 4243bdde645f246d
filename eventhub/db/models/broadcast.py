# eventhub/db/models/broadcast.py
from sqlalchemy import Column, Integer, String, ForeignKey, Date, Time, Float, DateTime, Index
from datetime import datetime
from eventhub.db.base import Base

BROADCAST_STATUSES = ("Open", "Accepted", "Expired", "Completed")


class BroadcastRequest(Base):
    __tablename__ = "broadcast_requests"
    __table_args__ = (
        Index("ix_broadcast_status_expires", "status", "expires_at"),
    )

    id = Column(Integer, primary_key=True, index=True)

    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)

    event_type = Column(String(100), nullable=False)
    guest_count = Column(Integer, nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(Time, nullable=False)
    location = Column(String(500), nullable=False)
    budget = Column(Float, nullable=False)
    requirements = Column(String(2000), nullable=False)

    status = Column(String, nullable=False, default="Open")
    accepted_by = Column(Integer, ForeignKey("event_managers.id", ondelete="SET NULL"), nullable=True, index=True)
    accepted_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
