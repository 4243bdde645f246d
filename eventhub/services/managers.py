# eventhub/services/managers.py
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from eventhub.core.exceptions import Conflict, ValidationFailed
from eventhub.core.security import create_access_token, hash_password, verify_password
from eventhub.core.timeutils import utcnow
from eventhub.db.models.manager import EventManager
from eventhub.schemas.manager import ManagerCreate, ManagerUpdate

logger = logging.getLogger(__name__)

# used when the manager registers without coordinates
DEFAULT_LAT = 28.6139
DEFAULT_LNG = 77.2090


def register_manager(db: Session, payload: ManagerCreate) -> EventManager:
    email = payload.email.lower()
    existing = db.query(EventManager).filter(
        or_(EventManager.email == email, EventManager.phone == payload.phone)
    ).first()
    if existing:
        raise Conflict("User already exists with this email or phone number")

    manager = EventManager(
        name=payload.name,
        email=email,
        phone=payload.phone,
        password_hash=hash_password(payload.password),
        address=payload.address,
        lat=payload.lat if payload.lat is not None else DEFAULT_LAT,
        lng=payload.lng if payload.lng is not None else DEFAULT_LNG,
    )
    db.add(manager)
    db.commit()
    db.refresh(manager)
    logger.info(f"Manager {manager.id} registered")
    return manager


def authenticate(db: Session, email: str, password: str):
    """Returns (manager, token) or None when the credentials do not match an active account."""
    manager = db.query(EventManager).filter(EventManager.email == email.lower()).first()
    if not manager or not verify_password(password, manager.password_hash):
        return None
    if not manager.is_active:
        return None

    manager.last_login = utcnow()
    db.commit()
    db.refresh(manager)
    return manager, issue_token(manager)


def issue_token(manager: EventManager) -> str:
    return create_access_token({"sub": str(manager.id)})


def update_profile(db: Session, manager: EventManager, payload: ManagerUpdate) -> EventManager:
    data = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in data:
        data["email"] = data["email"].lower()
        if data["email"] != manager.email:
            taken = db.query(EventManager).filter(EventManager.email == data["email"], EventManager.id != manager.id).first()
            if taken:
                raise Conflict("Email already exists")

    if "phone" in data and data["phone"] != manager.phone:
        taken = db.query(EventManager).filter(EventManager.phone == data["phone"], EventManager.id != manager.id).first()
        if taken:
            raise Conflict("Phone number already exists")

    for field, value in data.items():
        setattr(manager, field, value)

    db.commit()
    db.refresh(manager)
    return manager


def change_password(db: Session, manager: EventManager, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, manager.password_hash):
        raise ValidationFailed(
            "Current password is incorrect",
            details=[{"field": "current_password", "message": "does not match"}],
        )
    manager.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"Password changed for manager {manager.id}")


def deactivate(db: Session, manager: EventManager) -> None:
    manager.is_active = False
    db.commit()
    logger.info(f"Manager {manager.id} deactivated")
