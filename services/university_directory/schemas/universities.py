# services/university_directory/schemas/universities.py
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from services.university_directory.models.enums import Governorate, UniversityType
from services.university_directory.schemas.colleges import (
    CollegeViewModel,
    check_url,
)


# --- INPUT ---

class CreateBranchDto(BaseModel):
    name_ar: str = Field(..., min_length=1, max_length=200)
    name_en: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=500)
    governorate: Governorate


class UpdateBranchDto(CreateBranchDto):
    id: Optional[int] = None


class UniversityFields(BaseModel):
    name_ar: str = Field(..., min_length=1, max_length=200)
    name_en: Optional[str] = Field(None, max_length=200)
    type: UniversityType
    official_website: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=500)
    governorate: Governorate
    last_year_coordination: Optional[Decimal] = Field(None, ge=0, le=100)
    fees: Optional[Decimal] = Field(None, ge=0)
    information_sources: Optional[str] = None
    description: Optional[str] = None

    @field_validator("official_website")
    @classmethod
    def validate_website(cls, v):
        return check_url(v)


class CreateUniversityDto(UniversityFields):
    branches: Optional[List[CreateBranchDto]] = None


class UpdateUniversityDto(UniversityFields):
    id: Optional[int] = None


# --- OUTPUT ---

class BranchViewModel(BaseModel):
    id: int
    name_ar: str
    name_en: Optional[str] = None
    location: Optional[str] = None
    governorate: int
    governorate_ar: str


class UniversityTypeViewModel(BaseModel):
    type: int
    type_name_ar: str
    total_universities: int


class UniversityViewModel(BaseModel):
    id: int
    name_ar: str
    name_en: Optional[str] = None
    type: int
    type_ar: str
    official_website: Optional[str] = None
    location: Optional[str] = None
    governorate: int
    governorate_ar: str
    last_year_coordination: Optional[float] = None
    fees: Optional[float] = None
    information_sources: Optional[str] = None
    description: Optional[str] = None
    colleges_count: int = 0
    branches_count: int = 0
    colleges: List[CollegeViewModel] = []
    branches: List[BranchViewModel] = []
