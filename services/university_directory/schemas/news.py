# services/university_directory/schemas/news.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CreateNewsDto(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    date: datetime
    description: str = Field(..., min_length=1)


class UpdateNewsDto(CreateNewsDto):
    id: Optional[int] = None


class NewsViewModel(BaseModel):
    id: int
    title: str
    date: datetime
    description: str

    class Config:
        from_attributes = True
