# services/university_directory/controllers/auth_service.py
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from services.university_directory.models import User
from services.university_directory.repositories.generic import GenericRepository
from services.university_directory.schemas.auth import LoginRequest, LoginResponse
from shared.auth import create_access_token, verify_password
from shared.config import settings
from shared.db import get_db
from shared.logging_config import get_logger

logger = get_logger("auth")


def token_claims(user: User) -> dict:
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
    }
    if user.full_name:
        claims["name"] = user.full_name
    return claims


class AuthService:
    def __init__(self, db: AsyncSession):
        self.users = GenericRepository(db, User)

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Active, non-deleted user whose password matches; stamps the login time"""
        user = await self.users.first_or_default(
            func.lower(User.email) == email.strip().lower(),
            User.is_active.is_(True),
        )
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"email": email})
            return None

        user.last_login_at = datetime.utcnow()
        await self.users.update(user)
        logger.info(f"User logged in: {user.id}", extra={"user_id": user.id})
        return user

    async def login(self, request: LoginRequest) -> Optional[LoginResponse]:
        user = await self.authenticate(request.email, request.password)
        if user is None:
            return None

        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        expires_at = datetime.utcnow() + expires_delta
        token = create_access_token(token_claims(user), expires_delta)

        return LoginResponse(
            token=token,
            email=user.email,
            user_id=user.id,
            role=user.role.value,
            expires_at=expires_at,
        )


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)
