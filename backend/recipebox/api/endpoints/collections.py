"""
Recipe collection API endpoints.

Collections are private: every route acts on the caller's own collections
and anybody else's answer 404.
"""

from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.core.database import get_db
from recipebox.core.rate_limit import limiter, WRITE_LIMIT
from recipebox.models.user import User
from recipebox.schemas.collection import (
    CollectionCreate,
    CollectionDetailResponse,
    CollectionRecipeAdd,
    CollectionResponse,
    CollectionUpdate,
)
from recipebox.schemas.search import RecipeSummary
from recipebox.services.auth_service import get_current_user
from recipebox.services.collection_service import collection_service

router = APIRouter()


async def _detail(collection_id: int, user: User, db: AsyncSession) -> CollectionDetailResponse:
    collection, recipes = await collection_service.get_collection_recipes(collection_id, user, db)
    return CollectionDetailResponse(
        **CollectionResponse.model_validate(collection).model_dump(),
        recipes=[RecipeSummary.model_validate(recipe) for recipe in recipes],
        recipe_count=len(recipes),
    )


@router.get("/", response_model=List[CollectionResponse])
async def list_collections(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the current user's collections, newest first."""
    return await collection_service.list_collections(current_user, db)


@router.post("/", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_collection(
    request: Request,
    payload: CollectionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await collection_service.create_collection(payload, current_user, db)


@router.get("/{collection_id}", response_model=CollectionDetailResponse)
async def get_collection(
    collection_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a collection with its recipes and their count."""
    return await _detail(collection_id, current_user, db)


@router.put("/{collection_id}", response_model=CollectionResponse)
@limiter.limit(WRITE_LIMIT)
async def update_collection(
    request: Request,
    collection_id: int,
    payload: CollectionUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change the name or description; omitted fields are kept."""
    return await collection_service.update_collection(collection_id, payload, current_user, db)


@router.delete("/{collection_id}")
async def delete_collection(
    collection_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await collection_service.delete_collection(collection_id, current_user, db)
    return {"message": "Collection deleted successfully"}


@router.post("/{collection_id}/recipes", response_model=CollectionDetailResponse)
@limiter.limit(WRITE_LIMIT)
async def add_recipe_to_collection(
    request: Request,
    collection_id: int,
    payload: CollectionRecipeAdd,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Add a recipe the caller can see. Adding it again is a no-op."""
    await collection_service.add_recipe(collection_id, payload.recipe_id, current_user, db)
    return await _detail(collection_id, current_user, db)


@router.delete("/{collection_id}/recipes/{recipe_id}")
async def remove_recipe_from_collection(
    collection_id: int,
    recipe_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await collection_service.remove_recipe(collection_id, recipe_id, current_user, db)
    return {"message": "Recipe removed from collection"}
