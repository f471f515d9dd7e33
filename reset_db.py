# reset_db.py
import asyncio

import services.university_directory.models  # noqa: F401  (registers tables)
from shared.db import Base, close_db, get_engine
from shared.logging_config import logger


async def reset_db():
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("All tables dropped and recreated.")
    await close_db()


if __name__ == "__main__":
    asyncio.run(reset_db())
