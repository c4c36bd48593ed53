"""
Authentication-related API endpoints.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from recipebox.core.database import get_db
from recipebox.core.rate_limit import limiter, AUTH_LIMIT
from recipebox.models.user import User
from recipebox.services.auth_service import auth_service, bearer_scheme, get_current_user
from recipebox.schemas.auth import (
    UserLogin,
    UserRegister,
    UserResponse,
    TokenResponse
)
from recipebox.utils.exceptions import AuthenticationError

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_LIMIT)
async def register(
    request: Request,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register a new user."""
    user = await auth_service.create_user(
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
        full_name=user_data.full_name,
        db=db
    )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(AUTH_LIMIT)
async def login(
    request: Request,
    user_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login user and return access token."""
    user = await auth_service.authenticate_user(
        username=user_data.username,
        password=user_data.password,
        db=db
    )
    if not user:
        logger.info(f"Failed login for {user_data.username}")
        raise AuthenticationError("Incorrect username or password")

    return TokenResponse(
        access_token=auth_service.create_access_token(user.id),
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return UserResponse.model_validate(current_user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
):
    """Exchange a valid access token for a fresh one."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    user = await auth_service.user_from_token(credentials.credentials, db)

    return TokenResponse(
        access_token=auth_service.create_access_token(user.id),
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )
