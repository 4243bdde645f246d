# eventhub/db/models/service.py

from sqlalchemy import Column, DateTime, Integer, String, ForeignKey, Boolean, Float, func
from sqlalchemy.orm import relationship
from eventhub.db.base import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)

    manager_id = Column(Integer, ForeignKey("event_managers.id", ondelete="CASCADE"), nullable=False, index=True)

    # Basic details
    title = Column(String(200), nullable=False)
    category = Column(String, nullable=False, index=True)  # one of SERVICE_CATEGORIES
    description = Column(String(1000), nullable=False)

    # Pricing
    price = Column(Float, nullable=False)

    image = Column(String, nullable=True)

    # Status (soft delete)
    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    manager = relationship("EventManager", back_populates="services")
