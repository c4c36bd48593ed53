"""
Shared response envelopes.
"""

from typing import Generic, TypeVar, List
from pydantic import BaseModel, Field

T = TypeVar('T')


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a page-numbered listing, such as ``GET /recipes/``."""
    items: List[T]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1, description="1-indexed")
    page_size: int = Field(..., ge=1, le=100)
    total_pages: int = Field(..., ge=0)
    has_next: bool

    @classmethod
    def create(cls, items: List[T], total: int, page: int, page_size: int) -> "PaginatedResponse[T]":
        # ceil(total / page_size) without floats
        total_pages = -(-total // page_size)
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
        )
