# services/university_directory/models/departments.py
from sqlalchemy import Column, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from shared.db import Base
from services.university_directory.models.base import AuditMixin
from services.university_directory.models.enums import StudyType


class Department(AuditMixin, Base):
    __tablename__ = "departments"

    college_id = Column(Integer, ForeignKey("colleges.id", ondelete="CASCADE"), nullable=False)
    name_ar = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    study_type = Column(Enum(StudyType, name="study_type"), nullable=True)

    college = relationship("College", back_populates="departments")

    __table_args__ = (
        Index('idx_department_college', 'college_id'),
        Index('idx_department_study_type', 'study_type', 'is_deleted'),  # study-type search
    )
