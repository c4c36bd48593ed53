"""
User profile API endpoints.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.core.database import get_db
from recipebox.core.rate_limit import limiter, WRITE_LIMIT
from recipebox.models.user import User
from recipebox.schemas.auth import UserProfileUpdate, UserResponse
from recipebox.services.auth_service import auth_service, get_current_user

router = APIRouter()


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get the current user's profile."""
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=UserResponse)
@limiter.limit(WRITE_LIMIT)
async def update_profile(
    request: Request,
    payload: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the current user's profile.

    Args:
        payload: New display name and/or email; omitted fields are kept
        current_user: Current authenticated user
        db: Database session

    Returns:
        The updated user
    """
    user = await auth_service.update_profile(
        current_user,
        db,
        full_name=payload.full_name,
        email=payload.email,
    )
    return UserResponse.model_validate(user)
