"""
Ingredient Pydantic schemas.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


def _strip_name(v: str) -> str:
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Ingredient name must be at least 2 characters")
    return v


class IngredientCreate(BaseModel):
    """Schema for ingredient creation and replacement."""
    name: str = Field(..., min_length=2, max_length=255)
    category: Optional[str] = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _strip_name(v)

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class IngredientResponse(BaseModel):
    """Schema for ingredient response."""
    id: int
    name: str
    category: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RecipeIngredientIn(BaseModel):
    """An ingredient line on a recipe; unknown ingredient names are created."""
    name: str = Field(..., min_length=2, max_length=255)
    quantity: Optional[float] = Field(None, gt=0, le=100000)
    unit: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _strip_name(v)


class RecipeIngredientResponse(BaseModel):
    """An ingredient line as shown on a recipe."""
    ingredient_id: int
    name: str
    category: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True
