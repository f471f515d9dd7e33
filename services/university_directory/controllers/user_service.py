# services/university_directory/controllers/user_service.py
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.university_directory.models import User
from services.university_directory.repositories.generic import GenericRepository
from services.university_directory.schemas.users import UserCreate, UserUpdate
from shared.auth import get_password_hash
from shared.db import get_db
from shared.exceptions import NotFoundError, ValidationError
from shared.logging_config import get_logger

logger = get_logger("users")


class UserService:
    """Account administration behind the web admin pages"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = GenericRepository(db, User)

    async def list_users(self) -> List[User]:
        result = await self.db.execute(self.users.query().order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def get_user(self, id: int) -> Optional[User]:
        return await self.users.get_by_id(id)

    async def _email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        criteria = [func.lower(User.email) == email.lower()]
        if exclude_id is not None:
            criteria.append(User.id != exclude_id)
        return await self.users.exists(*criteria)

    async def create_user(self, payload: UserCreate) -> User:
        if await self._email_taken(payload.email):
            raise ValidationError("A user with this email already exists", field="email")

        user = User(
            email=payload.email,
            password_hash=get_password_hash(payload.password),
            full_name=payload.full_name,
            role=payload.role,
            is_active=payload.is_active,
        )
        try:
            user = await self.users.add(user)
        except IntegrityError:
            # the unique index also covers soft-deleted accounts
            await self.db.rollback()
            raise ValidationError("A user with this email already exists", field="email")

        logger.info(f"User created: {user.id}", extra={"user_id": user.id})
        return user

    async def update_user(self, id: int, payload: UserUpdate) -> User:
        user = await self.users.get_by_id(id)
        if user is None:
            raise NotFoundError("User", id)

        if await self._email_taken(payload.email, exclude_id=id):
            raise ValidationError("A user with this email already exists", field="email")

        user.email = payload.email
        user.full_name = payload.full_name
        user.role = payload.role
        user.is_active = payload.is_active
        if payload.password:
            user.password_hash = get_password_hash(payload.password)

        try:
            user = await self.users.update(user)
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("A user with this email already exists", field="email")

        logger.info(f"User updated: {user.id}", extra={"user_id": user.id})
        return user

    async def delete_user(self, id: int) -> bool:
        user = await self.users.get_by_id(id)
        if user is None:
            return False
        await self.users.soft_delete(user)
        logger.info(f"User deleted: {id}")
        return True


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)
