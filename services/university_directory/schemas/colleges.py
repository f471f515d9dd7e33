# services/university_directory/schemas/colleges.py
from decimal import Decimal
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

from services.university_directory.models.enums import StudyType


def check_url(value: Optional[str]) -> Optional[str]:
    if value is None or value.strip() == "":
        return None
    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Official website must be a valid http(s) URL")
    return value.strip()


# --- DEPARTMENTS ---

class DepartmentFields(BaseModel):
    name_ar: str = Field(..., min_length=1, max_length=200)
    name_en: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    study_type: Optional[StudyType] = None


class NewCollegeDepartmentDto(DepartmentFields):
    """Department created together with its college; the college id is not known yet"""
    college_id: Optional[int] = None


class CreateDepartmentDto(DepartmentFields):
    college_id: int


class UpdateDepartmentDto(DepartmentFields):
    id: Optional[int] = None
    college_id: int


class DepartmentViewModel(BaseModel):
    id: int
    name_ar: str
    name_en: Optional[str] = None
    study_type: Optional[int] = None
    study_type_ar: Optional[str] = None
    description: Optional[str] = None


# --- COLLEGES ---

class CollegeFields(BaseModel):
    name_ar: str = Field(..., min_length=1, max_length=200)
    name_en: Optional[str] = Field(None, max_length=200)
    university_id: int
    official_website: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    fees: Optional[Decimal] = Field(None, ge=0)
    last_year_coordination: Optional[Decimal] = Field(None, ge=0, le=100)
    fees_category_a: Optional[Decimal] = Field(None, ge=0)
    fees_category_b: Optional[Decimal] = Field(None, ge=0)
    fees_category_c: Optional[Decimal] = Field(None, ge=0)
    fees_per_hour: Optional[Decimal] = Field(None, ge=0)
    minimum_hours_per_semester: Optional[int] = Field(None, ge=1)
    additional_fees: Optional[Decimal] = Field(None, ge=0)

    @field_validator("official_website")
    @classmethod
    def validate_website(cls, v):
        return check_url(v)


class CreateCollegeDto(CollegeFields):
    departments: Optional[List[NewCollegeDepartmentDto]] = None


class UpdateCollegeDto(CollegeFields):
    id: Optional[int] = None


class UniversityBasicViewModel(BaseModel):
    id: int
    name_ar: str
    type: int
    type_ar: str


class CollegeViewModel(BaseModel):
    id: int
    name_ar: str
    name_en: Optional[str] = None
    university_id: int
    official_website: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    fees: Optional[float] = None
    last_year_coordination: Optional[float] = None
    fees_category_a: Optional[float] = None
    fees_category_b: Optional[float] = None
    fees_category_c: Optional[float] = None
    fees_per_hour: Optional[float] = None
    minimum_hours_per_semester: Optional[int] = None
    additional_fees: Optional[float] = None
    departments_count: int = 0
    departments: List[DepartmentViewModel] = []
    university: Optional[UniversityBasicViewModel] = None
