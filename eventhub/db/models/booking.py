# eventhub/db/models/booking.py
from sqlalchemy import Column, Integer, String, ForeignKey, Date, Time, Float, DateTime, Table, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from eventhub.db.base import Base

# bookings created from a broadcast request have no rows here
booking_services = Table(
    "booking_services",
    Base.metadata,
    Column("booking_id", Integer, ForeignKey("bookings.id", ondelete="CASCADE"), primary_key=True),
    Column("service_id", Integer, ForeignKey("services.id", ondelete="CASCADE"), primary_key=True),
)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_manager_status", "manager_id", "status"),
        Index("ix_bookings_date_manager", "date", "manager_id"),
    )

    id = Column(Integer, primary_key=True, index=True)

    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String, nullable=False)
    customer_email = Column(String, nullable=False, index=True)

    event_type = Column(String(100), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    location = Column(String(500), nullable=False)

    manager_id = Column(Integer, ForeignKey("event_managers.id"), nullable=False)

    total_amount = Column(Float, nullable=False)
    notes = Column(String(1000), nullable=True)

    status = Column(String, nullable=False, default="Pending")  # Pending | Confirmed | Cancelled | Completed
    payment_status = Column(String, nullable=False, default="Pending")  # Pending | Partial | Paid | Refunded

    # stamped when the booking enters Confirmed; decides who holds a contested slot
    confirmed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # relationships
    manager = relationship("EventManager", foreign_keys=[manager_id])
    services = relationship("Service", secondary=booking_services, lazy="selectin")

    @property
    def service_ids(self):
        return [s.id for s in self.services]
