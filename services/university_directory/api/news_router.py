# services/university_directory/api/news_router.py
from typing import List

from fastapi import APIRouter, Depends, Response, status

from services.university_directory.controllers.news_service import NewsService, get_news_service
from services.university_directory.schemas.news import CreateNewsDto, NewsViewModel, UpdateNewsDto
from shared.auth import get_current_admin_user
from shared.exceptions import NotFoundError, ValidationError

router = APIRouter(prefix="/api/news", tags=["News"])


@router.get("", response_model=List[NewsViewModel])
async def get_all_news(service: NewsService = Depends(get_news_service)):
    return await service.get_all_news()


@router.get("/{id}", response_model=NewsViewModel)
async def get_news(id: int, service: NewsService = Depends(get_news_service)):
    news = await service.get_news_by_id(id)
    if news is None:
        raise NotFoundError("News", id)
    return news


# --- ADMIN ---

@router.post("", response_model=NewsViewModel, status_code=status.HTTP_201_CREATED)
async def create_news(
    payload: CreateNewsDto,
    response: Response,
    service: NewsService = Depends(get_news_service),
    current_user: dict = Depends(get_current_admin_user)
):
    news = await service.create_news(payload)
    response.headers["Location"] = f"/api/news/{news.id}"
    return news


@router.put("", response_model=NewsViewModel)
async def update_news(
    payload: UpdateNewsDto,
    service: NewsService = Depends(get_news_service),
    current_user: dict = Depends(get_current_admin_user)
):
    if payload.id is None:
        raise ValidationError("News id is required", field="id")
    return await service.update_news(payload)


@router.patch("/{id}", response_model=NewsViewModel)
async def patch_news(
    id: int,
    payload: UpdateNewsDto,
    service: NewsService = Depends(get_news_service),
    current_user: dict = Depends(get_current_admin_user)
):
    payload.id = id
    return await service.update_news(payload)


@router.delete("/{id}")
async def delete_news(
    id: int,
    service: NewsService = Depends(get_news_service),
    current_user: dict = Depends(get_current_admin_user)
):
    if not await service.delete_news(id):
        raise NotFoundError("News", id)
    return {"message": "News deleted successfully"}
