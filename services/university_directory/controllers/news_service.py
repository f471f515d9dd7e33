# services/university_directory/controllers/news_service.py
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from services.university_directory.models import News
from services.university_directory.repositories.generic import GenericRepository
from services.university_directory.schemas.news import CreateNewsDto, NewsViewModel, UpdateNewsDto
from shared.db import get_db
from shared.exceptions import NotFoundError
from shared.logging_config import get_logger

logger = get_logger("news")


class NewsService:
    def __init__(self, db: AsyncSession):
        self.news = GenericRepository(db, News)

    async def get_all_news(self) -> List[NewsViewModel]:
        items = await self.news.get_all()
        items.sort(key=lambda n: n.date, reverse=True)
        return [NewsViewModel.model_validate(n) for n in items]

    async def get_news_by_id(self, id: int) -> Optional[NewsViewModel]:
        news = await self.news.get_by_id(id)
        if news is None:
            return None
        return NewsViewModel.model_validate(news)

    async def create_news(self, dto: CreateNewsDto) -> NewsViewModel:
        news = await self.news.add(News(**dto.model_dump()))
        logger.info(f"News created: {news.id}", extra={"news_id": news.id})
        return NewsViewModel.model_validate(news)

    async def update_news(self, dto: UpdateNewsDto) -> NewsViewModel:
        news = await self.news.get_by_id(dto.id)
        if news is None:
            raise NotFoundError("News", dto.id)

        news.title = dto.title
        news.date = dto.date
        news.description = dto.description
        news = await self.news.update(news)

        logger.info(f"News updated: {news.id}", extra={"news_id": news.id})
        return NewsViewModel.model_validate(news)

    async def delete_news(self, id: int) -> bool:
        if await self.news.get_by_id(id) is None:
            return False
        await self.news.delete(id)
        logger.info(f"News deleted: {id}")
        return True


def get_news_service(db: AsyncSession = Depends(get_db)) -> NewsService:
    return NewsService(db)
