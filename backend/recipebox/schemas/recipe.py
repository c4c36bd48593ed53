"""
Recipe, tag and category Pydantic schemas.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from recipebox.models.recipe import DEFAULT_TAG_COLOR
from recipebox.schemas.ingredient import RecipeIngredientIn, RecipeIngredientResponse
from recipebox.schemas.search import Difficulty, RecipeSummary, TagResponse
from recipebox.utils.validators import validate_hex_color, validate_http_url


class RecipeBase(BaseModel):
    """Fields shared by recipe create and update."""
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    instructions: str = Field(..., min_length=10, max_length=5000)
    prep_time: Optional[int] = Field(None, ge=1, le=1440, description="Minutes")
    cook_time: Optional[int] = Field(None, ge=1, le=1440, description="Minutes")
    servings: int = Field(1, ge=1, le=50)
    difficulty: Difficulty = Difficulty.EASY
    image_url: Optional[str] = Field(None, max_length=500)
    is_public: bool = True

    @field_validator("title", "instructions")
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if not validate_http_url(v):
            raise ValueError("Image URL must start with http:// or https://")
        return v


class RecipeCreate(RecipeBase):
    """Schema for recipe creation."""
    tags: List[str] = Field(default_factory=list, description="Tag names; missing tags are created")
    categories: List[int] = Field(default_factory=list, description="Category ids owned by the author")
    ingredients: List[RecipeIngredientIn] = Field(default_factory=list)


class RecipeUpdate(RecipeBase):
    """Schema for a full recipe update; omitted tag, category and ingredient lists are left as they are."""
    tags: Optional[List[str]] = None
    categories: Optional[List[int]] = None
    ingredients: Optional[List[RecipeIngredientIn]] = None


class CategoryCreate(BaseModel):
    """Schema for category creation."""
    name: str = Field(..., min_length=2, max_length=100)
    parent_id: Optional[int] = None


class CategoryResponse(BaseModel):
    """Schema for category response."""
    id: int
    user_id: int
    name: str
    parent_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RecipeResponse(RecipeSummary):
    """A recipe with its tags, categories and ingredient list."""
    tags: List[TagResponse] = Field(default_factory=list)
    categories: List[CategoryResponse] = Field(default_factory=list)
    ingredients: List[RecipeIngredientResponse] = Field(default_factory=list)


class TagCreate(BaseModel):
    """Schema for tag creation."""
    name: str = Field(..., min_length=2, max_length=100)
    color: str = DEFAULT_TAG_COLOR

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Tag name must be at least 2 characters")
        return v

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str) -> str:
        if not validate_hex_color(v):
            raise ValueError("color must be a valid hex color code")
        return v
