# eventhub/services/catalog.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from eventhub.core.exceptions import NotFound
from eventhub.db.models.service import Service
from eventhub.schemas.service import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


def list_services(
    db: Session,
    manager_id: int,
    category: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Service], int]:
    q = db.query(Service).filter(Service.manager_id == manager_id, Service.is_active == True)
    if category:
        q = q.filter(Service.category == category)
    total = q.count()
    services = q.order_by(Service.created_at.desc(), Service.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return services, total


def get_service(db: Session, manager_id: int, service_id: int) -> Service:
    service = (
        db.query(Service)
        .filter(Service.id == service_id, Service.manager_id == manager_id, Service.is_active == True)
        .first()
    )
    if not service:
        raise NotFound("Service not found")
    return service


def create_service(db: Session, manager_id: int, payload: ServiceCreate) -> Service:
    service = Service(
        manager_id=manager_id,
        title=payload.title,
        category=payload.category,
        description=payload.description,
        price=payload.price,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    logger.info(f"Service {service.id} created for manager {manager_id}")
    return service


def update_service(db: Session, manager_id: int, service_id: int, payload: ServiceUpdate) -> Service:
    service = get_service(db, manager_id, service_id)

    # Update fields one-by-one
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(service, field, value)

    db.commit()
    db.refresh(service)
    return service


def delete_service(db: Session, manager_id: int, service_id: int) -> None:
    """Soft delete; existing bookings keep their reference."""
    service = get_service(db, manager_id, service_id)
    service.is_active = False
    db.commit()
    logger.info(f"Service {service_id} deactivated for manager {manager_id}")
