# eventhub/api/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from eventhub.core.security import get_current_manager
from eventhub.db.base import get_db
from eventhub.db.models.manager import EventManager
from eventhub.schemas.common import MessageResponse
from eventhub.schemas.manager import LoginRequest, ManagerCreate, ManagerEnvelope, PasswordChange, TokenEnvelope
from eventhub.services import managers

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenEnvelope, status_code=status.HTTP_201_CREATED)
def register(payload: ManagerCreate, db: Session = Depends(get_db)):
    manager = managers.register_manager(db, payload)
    return TokenEnvelope(
        message="Registration successful",
        access_token=managers.issue_token(manager),
        user=manager,
    )


@router.post("/login", response_model=TokenEnvelope)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    result = managers.authenticate(db, payload.email, payload.password)
    if result is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    manager, token = result
    return TokenEnvelope(message="Login successful", access_token=token, user=manager)


@router.get("/me", response_model=ManagerEnvelope)
def me(current_manager: EventManager = Depends(get_current_manager)):
    return ManagerEnvelope(user=current_manager)


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current_manager: EventManager = Depends(get_current_manager),
):
    managers.change_password(db, current_manager, payload.current_password, payload.new_password)
    return MessageResponse(message="Password changed successfully")
