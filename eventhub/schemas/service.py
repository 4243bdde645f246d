# eventhub/schemas/service.py

from pydantic import BaseModel, confloat, constr, field_validator
from typing import List, Optional
from datetime import datetime

from eventhub.core.categories import is_valid_category
from eventhub.schemas.common import Pagination


def _check_category(v):
    if v is not None and not is_valid_category(v):
        raise ValueError("Invalid category")
    return v


# Manager creates service
class ServiceCreate(BaseModel):
    title: constr(strip_whitespace=True, min_length=2, max_length=200)
    category: str
    description: constr(strip_whitespace=True, min_length=10, max_length=1000)
    price: confloat(ge=0)

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        return _check_category(v)


# Manager updates service
class ServiceUpdate(BaseModel):
    title: Optional[constr(strip_whitespace=True, min_length=2, max_length=200)] = None
    category: Optional[str] = None
    description: Optional[constr(strip_whitespace=True, min_length=10, max_length=1000)] = None
    price: Optional[confloat(ge=0)] = None

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        return _check_category(v)


# What API returns
class ServiceResponse(BaseModel):
    id: int
    manager_id: int
    title: str
    category: str
    description: str
    price: float
    image: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    service: ServiceResponse


class ServiceListEnvelope(BaseModel):
    success: bool = True
    services: List[ServiceResponse]
    pagination: Pagination


class CategoryListEnvelope(BaseModel):
    success: bool = True
    categories: List[str]
