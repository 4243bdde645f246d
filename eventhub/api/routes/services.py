# eventhub/api/routes/services.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.core.categories import SERVICE_CATEGORIES
from eventhub.core.config import DEFAULT_PAGE_SIZE
from eventhub.core.security import get_current_manager
from eventhub.db.base import get_db
from eventhub.db.models.manager import EventManager
from eventhub.schemas.common import MessageResponse, paginate
from eventhub.schemas.service import (
    CategoryListEnvelope,
    ServiceCreate,
    ServiceEnvelope,
    ServiceListEnvelope,
    ServiceUpdate,
)
from eventhub.services import catalog

router = APIRouter(prefix="/services", tags=["services"])


# Public category list (must stay above /{service_id})
@router.get("/categories/list", response_model=CategoryListEnvelope)
def list_categories():
    return CategoryListEnvelope(categories=list(SERVICE_CATEGORIES))


@router.get("/", response_model=ServiceListEnvelope)
def list_services(
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    services, total = catalog.list_services(db, current_manager.id, category, page, limit)
    return ServiceListEnvelope(services=services, pagination=paginate(page, limit, total))


@router.get("/{service_id}", response_model=ServiceEnvelope)
def get_service(
    service_id: int,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    return ServiceEnvelope(service=catalog.get_service(db, current_manager.id, service_id))


@router.post("/", response_model=ServiceEnvelope, status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    service = catalog.create_service(db, current_manager.id, payload)
    return ServiceEnvelope(message="Service created successfully", service=service)


@router.put("/{service_id}", response_model=ServiceEnvelope)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    service = catalog.update_service(db, current_manager.id, service_id, payload)
    return ServiceEnvelope(message="Service updated successfully", service=service)


@router.delete("/{service_id}", response_model=MessageResponse)
def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    catalog.delete_service(db, current_manager.id, service_id)
    return MessageResponse(message="Service deleted successfully")
