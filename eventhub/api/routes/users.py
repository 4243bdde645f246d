# eventhub/api/routes/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.core.security import get_current_manager
from eventhub.db.base import get_db
from eventhub.db.models.manager import EventManager
from eventhub.schemas.common import MessageResponse
from eventhub.schemas.manager import ManagerEnvelope, ManagerUpdate
from eventhub.services import managers

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=ManagerEnvelope)
def get_profile(current_manager: EventManager = Depends(get_current_manager)):
    return ManagerEnvelope(user=current_manager)


@router.put("/profile", response_model=ManagerEnvelope)
def update_profile(
    payload: ManagerUpdate,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    manager = managers.update_profile(db, current_manager, payload)
    return ManagerEnvelope(message="Profile updated successfully", user=manager)


@router.delete("/account", response_model=MessageResponse)
def delete_account(
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    managers.deactivate(db, current_manager)
    return MessageResponse(message="Account deactivated successfully")
