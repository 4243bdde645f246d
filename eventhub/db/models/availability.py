# eventhub/db/models/availability.py
from sqlalchemy import Column, Integer, Time, Date, ForeignKey, Boolean, DateTime, String, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from eventhub.db.base import Base


class Availability(Base):
    """
    One calendar day of a manager.
    is_full_day=True: `status` alone describes the day.
    is_full_day=False: the day is split into time_slots, each with its own status.
    """
    __tablename__ = "availabilities"
    __table_args__ = (
        UniqueConstraint("manager_id", "date", name="uq_availability_manager_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    manager_id = Column(Integer, ForeignKey("event_managers.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)

    is_full_day = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False, default="available")  # available | unavailable | booked

    weekend_saturday = Column(Boolean, nullable=True)
    weekend_sunday = Column(Boolean, nullable=True)
    notes = Column(String, nullable=True, default="")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    time_slots = relationship(
        "TimeSlot",
        back_populates="availability",
        cascade="all, delete-orphan",
        order_by="TimeSlot.start_time",
        lazy="selectin",
    )

    @property
    def weekend_availability(self):
        if self.weekend_saturday is None and self.weekend_sunday is None:
            return None
        return {"saturday": bool(self.weekend_saturday), "sunday": bool(self.weekend_sunday)}


class TimeSlot(Base):
    """
    Part of a day. booking_id is set only while status == "booked".
    """
    __tablename__ = "availability_time_slots"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_time_slot_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    availability_id = Column(Integer, ForeignKey("availabilities.id", ondelete="CASCADE"), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String, nullable=False, default="available")  # available | unavailable | booked
    booking_id = Column(Integer, nullable=True)  # weak reference, no FK

    availability = relationship("Availability", back_populates="time_slots")
