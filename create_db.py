# create_db.py
import asyncio

from sqlalchemy import func, select

from services.university_directory.models import User, UserRole
from shared.auth import get_password_hash
from shared.config import settings
from shared.db import close_db, get_session_local, init_db
from shared.logging_config import logger


async def seed_admin():
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin seed")
        return

    async with get_session_local()() as session:
        result = await session.execute(
            select(User).where(func.lower(User.email) == settings.ADMIN_EMAIL.lower())
        )
        if result.scalars().first() is not None:
            logger.info(f"Admin user already exists: {settings.ADMIN_EMAIL}")
            return

        session.add(User(
            email=settings.ADMIN_EMAIL,
            password_hash=get_password_hash(settings.ADMIN_PASSWORD),
            full_name="Administrator",
            role=UserRole.ADMIN,
            is_active=True,
        ))
        await session.commit()
        logger.info(f"Admin user created: {settings.ADMIN_EMAIL}")


async def init_models():
    logger.info("Creating tables...")
    await init_db()
    logger.info("Tables created.")
    await seed_admin()
    await close_db()


if __name__ == "__main__":
    asyncio.run(init_models())
