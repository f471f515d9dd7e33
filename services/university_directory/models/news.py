# services/university_directory/models/news.py
from sqlalchemy import Column, DateTime, Index, String, Text

from shared.db import Base
from services.university_directory.models.base import AuditMixin


class News(AuditMixin, Base):
    __tablename__ = "news"

    title = Column(String(500), nullable=False)
    date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=False)

    __table_args__ = (
        Index('idx_news_date', 'date'),
    )
