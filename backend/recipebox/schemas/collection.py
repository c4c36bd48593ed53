"""
Recipe collection Pydantic schemas.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from recipebox.schemas.search import RecipeSummary


class CollectionCreate(BaseModel):
    """Schema for collection creation."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CollectionUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CollectionRecipeAdd(BaseModel):
    recipe_id: int


class CollectionResponse(BaseModel):
    """Schema for collection response."""
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CollectionDetailResponse(CollectionResponse):
    """A collection with the recipes in it, most recently created first."""
    recipes: List[RecipeSummary] = Field(default_factory=list)
    recipe_count: int = Field(0, ge=0)
