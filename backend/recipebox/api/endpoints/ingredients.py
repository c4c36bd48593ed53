"""
Ingredient catalogue API endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.core.database import get_db
from recipebox.core.rate_limit import limiter, WRITE_LIMIT
from recipebox.models.user import User
from recipebox.schemas.ingredient import IngredientCreate, IngredientResponse
from recipebox.services.auth_service import get_current_user, require_admin
from recipebox.services.ingredient_service import ingredient_service

router = APIRouter()


@router.get("/", response_model=List[IngredientResponse])
async def list_ingredients(
    search: Optional[str] = Query(None, max_length=100, description="Case-insensitive name fragment"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List ingredients alphabetically.

    With ``search`` only the first ten names containing it are returned,
    which is what ingredient pickers ask for while the user types.
    """
    return await ingredient_service.list_ingredients(db, search=search)


@router.get("/{ingredient_id}", response_model=IngredientResponse)
async def get_ingredient(
    ingredient_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ingredient_service.get_ingredient(ingredient_id, db)


@router.post("/", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_ingredient(
    request: Request,
    payload: IngredientCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ingredient_service.create_ingredient(payload, db)


@router.put("/{ingredient_id}", response_model=IngredientResponse)
async def update_ingredient(
    ingredient_id: int,
    payload: IngredientCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Rename or recategorise an ingredient (admin only)."""
    return await ingredient_service.update_ingredient(ingredient_id, payload, db)


@router.delete("/{ingredient_id}")
async def delete_ingredient(
    ingredient_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete an ingredient no recipe uses (admin only)."""
    await ingredient_service.delete_ingredient(ingredient_id, db)
    return {"message": "Ingredient deleted successfully"}
