"""
Authentication service for user management and JWT tokens.
"""

from datetime import datetime, timedelta
from typing import Optional
import hashlib
import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from jose import JWTError, jwt
from loguru import logger

from recipebox.core.database import get_db
from recipebox.core.config import settings
from recipebox.models.user import User
from recipebox.utils.exceptions import AuthenticationError, PermissionDeniedError, ValidationError


class AuthService:
    """Service for authentication and authorization."""

    def _password_bytes(self, password: str) -> bytes:
        password_bytes = password.encode("utf-8")
        # Bcrypt has a 72-byte limit; longer passwords are pre-hashed
        if len(password_bytes) > 72:
            password_bytes = hashlib.sha256(password_bytes).hexdigest().encode("utf-8")
        return password_bytes

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt."""
        hashed = bcrypt.hashpw(self._password_bytes(password), bcrypt.gensalt())
        return hashed.decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        try:
            return bcrypt.checkpw(self._password_bytes(plain_password), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    def create_access_token(self, user_id: int) -> str:
        """Create a JWT access token."""
        now = datetime.utcnow()
        to_encode = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            "iss": settings.TOKEN_ISSUER,
            "type": "access",
        }
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    def decode_access_token(self, token: str) -> int:
        """
        Validate a token and return its user id.

        Raises:
            AuthenticationError: If the token is invalid, expired or not an access token
        """
        try:
            payload = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM],
                issuer=settings.TOKEN_ISSUER,
            )
        except JWTError as e:
            raise AuthenticationError("Could not validate credentials") from e

        subject = payload.get("sub")
        if payload.get("type") != "access" or subject is None:
            raise AuthenticationError("Could not validate credentials")
        try:
            return int(subject)
        except ValueError as e:
            raise AuthenticationError("Could not validate credentials") from e

    async def get_user_by_username(self, username: str, db: AsyncSession) -> Optional[User]:
        """Get user by username."""
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str, db: AsyncSession) -> Optional[User]:
        """Get user by email."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: int, db: AsyncSession) -> Optional[User]:
        """Get user by ID."""
        return await db.get(User, user_id)

    async def create_user(
        self,
        username: str,
        email: str,
        password: str,
        db: AsyncSession,
        full_name: Optional[str] = None,
        is_admin: bool = False,
    ) -> User:
        """Create a new user."""
        if await self.get_user_by_username(username, db):
            raise ValidationError("Username already exists", field="username")

        if await self.get_user_by_email(email, db):
            raise ValidationError("Email already exists", field="email")

        user = User(
            username=username,
            email=email,
            hashed_password=self.hash_password(password),
            full_name=full_name,
            is_active=True,
            is_admin=is_admin,
        )

        db.add(user)
        await db.commit()

        logger.info(f"Created new user: {username}")
        return user

    async def update_profile(
        self,
        user: User,
        db: AsyncSession,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """Change a user's display name or email; ``None`` leaves a field as it is."""
        if email is not None and email != user.email:
            if await self.get_user_by_email(email, db):
                raise ValidationError("Email already exists", field="email")
            user.email = email
        if full_name is not None:
            user.full_name = full_name.strip() or None
        user.updated_at = datetime.utcnow()

        await db.commit()
        logger.info(f"Updated profile of user {user.id}")
        return user

    async def authenticate_user(
        self,
        username: str,
        password: str,
        db: AsyncSession
    ) -> Optional[User]:
        """Authenticate a user with username and password."""
        user = await self.get_user_by_username(username, db)

        if not user or not user.is_active:
            return None

        if not self.verify_password(password, user.hashed_password):
            return None

        return user

    async def user_from_token(self, token: str, db: AsyncSession) -> User:
        """Resolve an active user from a bearer token."""
        user = await self.get_user_by_id(self.decode_access_token(token), db)
        if user is None:
            raise AuthenticationError("Could not validate credentials")
        if not user.is_active:
            raise PermissionDeniedError("User account is disabled")
        return user


# Global instance for dependency injection
auth_service = AuthService()

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Dependency for getting current user."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    user = await auth_service.user_from_token(credentials.credentials, db)
    request.state.user = user
    return user


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Dependency for optional authentication; invalid tokens are treated as anonymous."""
    if credentials is None:
        return None
    try:
        user = await auth_service.user_from_token(credentials.credentials, db)
    except (AuthenticationError, PermissionDeniedError) as e:
        logger.debug(f"Optional authentication failed: {e}")
        return None
    request.state.user = user
    return user


async def require_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Dependency for requiring admin privileges."""
    if not current_user.is_admin:
        raise PermissionDeniedError("Admin privileges required")
    return current_user
