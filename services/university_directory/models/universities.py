# services/university_directory/models/universities.py
from sqlalchemy import Column, Enum, Index, Numeric, String, Text
from sqlalchemy.orm import relationship

from shared.db import Base
from services.university_directory.models.base import AuditMixin
from services.university_directory.models.enums import Governorate, UniversityType


class University(AuditMixin, Base):
    __tablename__ = "universities"

    name_ar = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=True)
    type = Column(Enum(UniversityType, name="university_type"), nullable=False)
    official_website = Column(String(500), nullable=True)
    location = Column(String(500), nullable=True)
    governorate = Column(Enum(Governorate, name="governorate"), nullable=False)
    last_year_coordination = Column(Numeric(18, 2), nullable=True)
    fees = Column(Numeric(18, 2), nullable=True)
    information_sources = Column(Text, nullable=True)
    description = Column(Text, nullable=True)

    # Storage-level cascade: rows are removed by the database, not loaded and deleted one by one
    colleges = relationship("College", back_populates="university", cascade="all, delete-orphan", passive_deletes=True)
    branches = relationship("UniversityBranch", back_populates="university", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index('idx_university_name_ar', 'name_ar'),
        Index('idx_university_type', 'type'),
        Index('idx_university_governorate', 'governorate'),
        Index('idx_university_is_deleted', 'is_deleted'),
        Index('idx_university_type_deleted', 'type', 'is_deleted'),  # listing by type
        Index('idx_university_governorate_deleted', 'governorate', 'is_deleted'),
    )
