# services/university_directory/models/branches.py
from sqlalchemy import Column, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from shared.db import Base
from services.university_directory.models.base import AuditMixin
from services.university_directory.models.enums import Governorate


class UniversityBranch(AuditMixin, Base):
    __tablename__ = "university_branches"

    university_id = Column(Integer, ForeignKey("universities.id", ondelete="CASCADE"), nullable=False)
    name_ar = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=True)
    location = Column(String(500), nullable=True)
    governorate = Column(Enum(Governorate, name="governorate"), nullable=False)

    university = relationship("University", back_populates="branches")

    __table_args__ = (
        Index('idx_branch_university_deleted', 'university_id', 'is_deleted'),
    )
