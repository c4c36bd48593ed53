"""
Tag and category API endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.core.database import get_db
from recipebox.core.rate_limit import limiter, WRITE_LIMIT
from recipebox.models.user import User
from recipebox.schemas.recipe import CategoryCreate, CategoryResponse, TagCreate
from recipebox.schemas.search import TagResponse
from recipebox.services.auth_service import get_current_user, require_admin
from recipebox.services.tag_service import tag_service

router = APIRouter()
category_router = APIRouter()


@router.get("/", response_model=List[TagResponse])
async def list_tags(db: AsyncSession = Depends(get_db)):
    """List all tags alphabetically."""
    return await tag_service.list_tags(db)


@router.post("/", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_tag(
    request: Request,
    payload: TagCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await tag_service.create_tag(payload, db)


@router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(tag_id: int, db: AsyncSession = Depends(get_db)):
    return await tag_service.get_tag(tag_id, db)


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    payload: TagCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Rename or recolour a tag (admin only)."""
    return await tag_service.update_tag(tag_id, payload, db)


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await tag_service.delete_tag(tag_id, db)
    return {"message": "Tag deleted successfully"}


@category_router.get("/", response_model=List[CategoryResponse])
async def list_categories(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the current user's categories."""
    return await tag_service.list_categories(current_user, db)


@category_router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_category(
    request: Request,
    payload: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await tag_service.create_category(payload, current_user, db)
