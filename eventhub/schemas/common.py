# eventhub/schemas/common.py
from pydantic import BaseModel
from typing import Optional


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class MessageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


def paginate(page: int, limit: int, total: int) -> Pagination:
    pages = (total + limit - 1) // limit if limit else 0
    return Pagination(page=page, limit=limit, total=total, pages=pages)
