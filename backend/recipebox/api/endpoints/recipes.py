"""
Recipe CRUD API endpoints.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.core.database import get_db
from recipebox.core.rate_limit import limiter, WRITE_LIMIT
from recipebox.models.user import User
from recipebox.schemas.common import PaginatedResponse
from recipebox.schemas.recipe import RecipeCreate, RecipeUpdate, RecipeResponse
from recipebox.services.auth_service import get_current_user, get_current_user_optional
from recipebox.services.recipe_service import recipe_service

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[RecipeResponse])
async def list_recipes(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """
    Get a page of recipes, newest first.

    Anonymous callers only see public recipes; signed-in users also see
    their own private ones.
    """
    recipes, total = await recipe_service.list_recipes(
        db,
        viewer=current_user,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return PaginatedResponse.create(
        items=[RecipeResponse.model_validate(recipe) for recipe in recipes],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """Get a recipe with its tags and categories."""
    recipe = await recipe_service.get_recipe(recipe_id, db, viewer=current_user)
    return RecipeResponse.model_validate(recipe)


@router.post("/", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_recipe(
    request: Request,
    payload: RecipeCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a recipe owned by the current user."""
    recipe = await recipe_service.create_recipe(payload, current_user, db)
    return RecipeResponse.model_validate(recipe)


@router.put("/{recipe_id}", response_model=RecipeResponse)
@limiter.limit(WRITE_LIMIT)
async def update_recipe(
    request: Request,
    recipe_id: int,
    payload: RecipeUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Replace a recipe. Only its owner or an admin may do this."""
    recipe = await recipe_service.update_recipe(recipe_id, payload, current_user, db)
    return RecipeResponse.model_validate(recipe)


@router.delete("/{recipe_id}")
async def delete_recipe(
    recipe_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a recipe. Only its owner or an admin may do this."""
    await recipe_service.delete_recipe(recipe_id, current_user, db)
    return {"message": "Recipe deleted successfully"}
