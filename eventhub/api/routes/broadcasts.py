# eventhub/api/routes/broadcasts.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.core.config import DEFAULT_PAGE_SIZE
from eventhub.core.security import get_current_manager
from eventhub.db.base import get_db
from eventhub.db.models.manager import EventManager
from eventhub.schemas.broadcast import (
    BroadcastAcceptEnvelope,
    BroadcastCreate,
    BroadcastEnvelope,
    BroadcastListEnvelope,
    BroadcastStatsEnvelope,
)
from eventhub.schemas.common import paginate
from eventhub.services import broadcasts as broadcast_service

router = APIRouter(prefix="/broadcasts", tags=["broadcasts"])

BroadcastStatus = Literal["Open", "Accepted", "Expired", "Completed"]


@router.get("/stats/dashboard", response_model=BroadcastStatsEnvelope)
def broadcast_stats(
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    return BroadcastStatsEnvelope(stats=broadcast_service.broadcast_stats(db, current_manager.id))


@router.get("/my/accepted", response_model=BroadcastListEnvelope)
def my_accepted(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    items, total = broadcast_service.list_accepted(db, current_manager.id, page, limit)
    return BroadcastListEnvelope(broadcasts=items, pagination=paginate(page, limit, total))


@router.get("/", response_model=BroadcastListEnvelope)
def list_broadcasts(
    status_filter: Optional[BroadcastStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    items, total = broadcast_service.list_requests(db, status_filter, page, limit)
    return BroadcastListEnvelope(broadcasts=items, pagination=paginate(page, limit, total))


# Customers post requests without an account
@router.post("/", response_model=BroadcastEnvelope, status_code=status.HTTP_201_CREATED)
def create_broadcast(payload: BroadcastCreate, db: Session = Depends(get_db)):
    broadcast = broadcast_service.create_request(db, payload)
    return BroadcastEnvelope(message="Broadcast request created successfully", broadcast=broadcast)


@router.get("/{broadcast_id}", response_model=BroadcastEnvelope)
def get_broadcast(
    broadcast_id: int,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    return BroadcastEnvelope(broadcast=broadcast_service.get_request(db, broadcast_id))


@router.put("/{broadcast_id}/accept", response_model=BroadcastAcceptEnvelope)
def accept_broadcast(
    broadcast_id: int,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    broadcast, booking = broadcast_service.accept_request(db, broadcast_id, current_manager.id)
    return BroadcastAcceptEnvelope(
        message="Broadcast request accepted successfully",
        broadcast=broadcast,
        booking=booking,
    )
