"""
Search-related Pydantic schemas.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SortField(str, Enum):
    RELEVANCE = "relevance"
    CREATED_AT = "created_at"
    TITLE = "title"
    PREP_TIME = "prep_time"
    COOK_TIME = "cook_time"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SearchFilters(BaseModel):
    """
    Structured recipe search request.

    Every field is optional; an absent field places no constraint on the
    result. Tags and categories are OR-matched within themselves and ANDed
    with everything else.
    """
    query: str = ""
    user_id: Optional[int] = None
    difficulty: Optional[Difficulty] = None
    tags: List[str] = Field(default_factory=list)
    categories: List[int] = Field(default_factory=list)
    min_prep_time: Optional[int] = None
    max_prep_time: Optional[int] = None
    min_cook_time: Optional[int] = None
    max_cook_time: Optional[int] = None
    min_servings: Optional[int] = None
    max_servings: Optional[int] = None
    is_public: Optional[bool] = None
    sort_by: Optional[SortField] = None
    sort_order: SortOrder = SortOrder.DESC
    limit: Optional[int] = None
    offset: Optional[int] = None


class RecipeSummary(BaseModel):
    """A recipe row as returned by search."""
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    instructions: str
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: int
    difficulty: str
    image_url: Optional[str] = None
    is_public: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SearchResult(BaseModel):
    """One page of search results with pagination metadata."""
    recipes: List[RecipeSummary]
    total_count: int = Field(..., ge=0)
    current_page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool

    @classmethod
    def create(
        cls,
        recipes: List[RecipeSummary],
        total_count: int,
        page_size: int,
        offset: Optional[int] = None,
    ) -> "SearchResult":
        """
        Build a result and derive the page flags.

        Args:
            recipes: Rows of the current page
            total_count: Rows matching the filters, ignoring pagination
            page_size: Effective limit of the query
            offset: Offset of the query, if any

        Returns:
            SearchResult instance
        """
        current_page = 1
        if offset is not None and page_size > 0:
            current_page = offset // page_size + 1
        return cls(
            recipes=recipes,
            total_count=total_count,
            current_page=current_page,
            page_size=page_size,
            has_next=current_page * page_size < total_count,
            has_prev=current_page > 1,
        )


class TagResponse(BaseModel):
    """Schema for tag response."""
    id: int
    name: str
    color: str
    created_at: datetime

    class Config:
        from_attributes = True


class PopularTag(TagResponse):
    """A tag with the number of recipes that use it."""
    recipe_count: int = Field(..., ge=0)
