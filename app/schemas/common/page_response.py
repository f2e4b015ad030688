from pydantic import BaseModel
from typing import List, Generic, TypeVar

T = TypeVar("T")


class PaginationData(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class PageResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    items: List[T]
    pagination: PaginationData
