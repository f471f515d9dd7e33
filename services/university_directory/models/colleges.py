# services/university_directory/models/colleges.py
from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from shared.db import Base
from services.university_directory.models.base import AuditMixin


class College(AuditMixin, Base):
    __tablename__ = "colleges"

    university_id = Column(Integer, ForeignKey("universities.id", ondelete="CASCADE"), nullable=False)
    name_ar = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=True)
    official_website = Column(String(500), nullable=True)
    location = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    fees = Column(Numeric(18, 2), nullable=True)
    last_year_coordination = Column(Numeric(18, 2), nullable=True)

    # Category pricing (national and foreign universities)
    fees_category_a = Column(Numeric(18, 2), nullable=True)
    fees_category_b = Column(Numeric(18, 2), nullable=True)
    fees_category_c = Column(Numeric(18, 2), nullable=True)

    # Credit-hour pricing (higher institutes)
    fees_per_hour = Column(Numeric(18, 2), nullable=True)
    minimum_hours_per_semester = Column(Integer, nullable=True)
    additional_fees = Column(Numeric(18, 2), nullable=True)

    university = relationship("University", back_populates="colleges")
    departments = relationship("Department", back_populates="college", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index('idx_college_university', 'university_id'),
        Index('idx_college_name_ar', 'name_ar'),
        Index('idx_college_university_deleted', 'university_id', 'is_deleted'),
    )
