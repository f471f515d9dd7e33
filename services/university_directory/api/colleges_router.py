# services/university_directory/api/colleges_router.py
from fastapi import APIRouter, Depends

from services.university_directory.controllers.university_service import (
    UniversityService,
    get_university_service,
)
from services.university_directory.schemas.colleges import CollegeViewModel
from shared.exceptions import NotFoundError

router = APIRouter(prefix="/api/colleges", tags=["Colleges"])


@router.get("/{id}", response_model=CollegeViewModel, response_model_exclude_none=True)
async def get_college(id: int, service: UniversityService = Depends(get_university_service)):
    college = await service.get_college_by_id(id)
    if college is None:
        raise NotFoundError("College", id)
    return college
