# eventhub/services/broadcasts.py
"""
Broadcast requests: customers post an open job, managers race to accept it.

Acceptance is first-accept-wins. The Open -> Accepted flip is one
conditional UPDATE, and the booking derived from it is inserted in the
same transaction, so either both exist or neither does.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from eventhub.core import config
from eventhub.core.exceptions import Conflict, NotFound, ValidationFailed
from eventhub.core.timeutils import utcnow
from eventhub.db.models.booking import Booking
from eventhub.db.models.broadcast import BroadcastRequest
from eventhub.schemas.booking import BookingDraft
from eventhub.schemas.broadcast import BroadcastCreate
from eventhub.services.bookings import create_booking

logger = logging.getLogger(__name__)

NOTES_LIMIT = 1000


def create_request(db: Session, payload: BroadcastCreate, now: Optional[datetime] = None) -> BroadcastRequest:
    now = now or utcnow()
    if payload.date <= now.date():
        raise ValidationFailed(
            "Event date must be in the future",
            details=[{"field": "date", "message": "must be in the future"}],
        )

    broadcast = BroadcastRequest(
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        customer_email=payload.customer_email,
        event_type=payload.event_type,
        guest_count=payload.guest_count,
        date=payload.date,
        time=payload.time,
        location=payload.location,
        budget=float(payload.budget),
        requirements=payload.requirements,
        status="Open",
        expires_at=now + timedelta(days=config.BROADCAST_TTL_DAYS),
    )
    db.add(broadcast)
    db.commit()
    db.refresh(broadcast)
    logger.info(f"Broadcast request {broadcast.id} opened, expires at {broadcast.expires_at}")
    return broadcast


def get_request(db: Session, broadcast_id: int) -> BroadcastRequest:
    broadcast = db.query(BroadcastRequest).filter(BroadcastRequest.id == broadcast_id).first()
    if not broadcast:
        raise NotFound("Broadcast request not found")
    return broadcast


def _draft_from(broadcast: BroadcastRequest) -> BookingDraft:
    notes = f"From broadcast request: {broadcast.requirements}"
    return BookingDraft(
        customer_name=broadcast.customer_name,
        customer_phone=broadcast.customer_phone,
        customer_email=broadcast.customer_email,
        event_type=broadcast.event_type,
        date=broadcast.date,
        time=broadcast.time,
        location=broadcast.location,
        service_ids=[],
        total_amount=broadcast.budget,
        notes=notes[:NOTES_LIMIT],
    )


def accept_request(
    db: Session,
    broadcast_id: int,
    manager_id: int,
    now: Optional[datetime] = None,
) -> Tuple[BroadcastRequest, Booking]:
    now = now or utcnow()
    broadcast = get_request(db, broadcast_id)

    won = (
        db.query(BroadcastRequest)
        .filter(
            BroadcastRequest.id == broadcast_id,
            BroadcastRequest.status == "Open",
            BroadcastRequest.expires_at > now,
        )
        .update(
            {"status": "Accepted", "accepted_by": manager_id, "accepted_at": now, "updated_at": now},
            synchronize_session=False,
        )
    )
    if won != 1:
        db.rollback()
        logger.warning(f"Manager {manager_id} lost or missed broadcast {broadcast_id}")
        raise Conflict("Broadcast request is no longer available")

    try:
        db.refresh(broadcast)
        booking = create_booking(db, manager_id, _draft_from(broadcast), from_broadcast=True, commit=False)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Booking creation failed while accepting broadcast {broadcast_id}; acceptance rolled back")
        raise

    db.refresh(broadcast)
    db.refresh(booking)
    logger.info(f"Broadcast {broadcast_id} accepted by manager {manager_id}, booking {booking.id} created")
    return broadcast, booking


def _open_query(db: Session, now: datetime):
    return db.query(BroadcastRequest).filter(
        BroadcastRequest.status == "Open",
        BroadcastRequest.expires_at > now,
    )


def list_requests(
    db: Session,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    now: Optional[datetime] = None,
) -> Tuple[List[BroadcastRequest], int]:
    """Open requests by default; expired ones move from Open to Expired at read time, before the reaper flips them."""
    now = now or utcnow()
    if status in (None, "Open"):
        q = _open_query(db, now)
    elif status == "Expired":
        q = db.query(BroadcastRequest).filter(
            or_(
                BroadcastRequest.status == "Expired",
                and_(BroadcastRequest.status == "Open", BroadcastRequest.expires_at <= now),
            )
        )
    else:
        q = db.query(BroadcastRequest).filter(BroadcastRequest.status == status)
    total = q.count()
    items = q.order_by(BroadcastRequest.created_at.desc(), BroadcastRequest.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return items, total


def list_accepted(db: Session, manager_id: int, page: int = 1, limit: int = 10) -> Tuple[List[BroadcastRequest], int]:
    q = db.query(BroadcastRequest).filter(BroadcastRequest.accepted_by == manager_id)
    total = q.count()
    items = q.order_by(BroadcastRequest.accepted_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return items, total


def broadcast_stats(db: Session, manager_id: int, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    total_open = _open_query(db, now).with_entities(func.count(BroadcastRequest.id)).scalar() or 0
    accepted = db.query(func.count(BroadcastRequest.id)).filter(BroadcastRequest.accepted_by == manager_id).scalar() or 0
    completed = db.query(func.count(BroadcastRequest.id)).filter(
        BroadcastRequest.accepted_by == manager_id,
        BroadcastRequest.status == "Completed",
    ).scalar() or 0
    return {"total_open": int(total_open), "accepted": int(accepted), "completed": int(completed)}


# --------------------------
# expiry reaper
# --------------------------
def expire_stale(db: Session, now: Optional[datetime] = None) -> int:
    now = now or utcnow()
    count = (
        db.query(BroadcastRequest)
        .filter(BroadcastRequest.status == "Open", BroadcastRequest.expires_at <= now)
        .update({"status": "Expired", "updated_at": now}, synchronize_session=False)
    )
    db.commit()
    return count


def purge_expired(db: Session, now: Optional[datetime] = None) -> int:
    """Delete records of any status whose expiry passed more than the retention window ago."""
    now = now or utcnow()
    cutoff = now - timedelta(days=config.BROADCAST_RETENTION_DAYS)
    count = (
        db.query(BroadcastRequest)
        .filter(BroadcastRequest.expires_at <= cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    return count


def reap(db: Session, now: Optional[datetime] = None) -> Tuple[int, int]:
    now = now or utcnow()
    expired = expire_stale(db, now)
    purged = purge_expired(db, now)
    if expired or purged:
        logger.info(f"Broadcast reaper: {expired} expired, {purged} purged")
    return expired, purged
