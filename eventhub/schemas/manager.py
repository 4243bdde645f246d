# eventhub/schemas/manager.py
import re

from pydantic import BaseModel, EmailStr, constr, field_validator
from typing import Optional
from datetime import datetime

from eventhub.schemas.booking import PHONE_PATTERN

_SYMBOL_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


def _check_password_strength(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    if not re.search(r"[A-Z]", v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", v):
        raise ValueError("Password must contain at least one lowercase letter")
    if not _SYMBOL_RE.search(v):
        raise ValueError("Password must contain at least one symbol")
    return v


class ManagerCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=2, max_length=100)
    email: EmailStr
    phone: constr(pattern=PHONE_PATTERN)
    password: str
    address: constr(strip_whitespace=True, min_length=5, max_length=500)
    lat: Optional[float] = None
    lng: Optional[float] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return _check_password_strength(v)


class ManagerUpdate(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=2, max_length=100)] = None
    email: Optional[EmailStr] = None
    phone: Optional[constr(pattern=PHONE_PATTERN)] = None
    address: Optional[constr(strip_whitespace=True, min_length=5, max_length=500)] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: constr(min_length=1)


class PasswordChange(BaseModel):
    current_password: constr(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v):
        return _check_password_strength(v)


class ManagerResponse(BaseModel):
    id: int
    name: str
    email: EmailStr
    phone: str
    address: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    photo: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    avg_rating: Optional[float] = None
    rating_count: Optional[int] = None

    class Config:
        from_attributes = True


class ManagerEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: ManagerResponse


class TokenEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    access_token: str
    token_type: str = "bearer"
    user: ManagerResponse
