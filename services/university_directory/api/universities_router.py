# services/university_directory/api/universities_router.py
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from services.university_directory.controllers.university_service import (
    UniversityService,
    get_university_service,
)
from services.university_directory.models.enums import (
    Governorate,
    StudyType,
    UniversityType,
    parse_enum,
)
from services.university_directory.schemas.colleges import (
    CollegeViewModel,
    CreateCollegeDto,
    CreateDepartmentDto,
    DepartmentViewModel,
    UpdateCollegeDto,
    UpdateDepartmentDto,
)
from services.university_directory.schemas.universities import (
    BranchViewModel,
    CreateBranchDto,
    CreateUniversityDto,
    UniversityTypeViewModel,
    UniversityViewModel,
    UpdateBranchDto,
    UpdateUniversityDto,
)
from shared.auth import get_current_admin_user
from shared.exceptions import NotFoundError, ValidationError

router = APIRouter(prefix="/api/universities", tags=["Universities"])

VALID_TYPES_MESSAGE = (
    "Invalid university type. Valid types: 1=Governmental, 2=Private, 3=National, "
    "4=HigherInstitute, 5=Foreign, 6=Technological"
)


def _require_id(id: Optional[int], entity: str) -> int:
    if id is None:
        raise ValidationError(f"{entity} id is required", field="id")
    return id


# --- PUBLIC READS ---

@router.get("/types", response_model=List[UniversityTypeViewModel])
async def get_university_types(service: UniversityService = Depends(get_university_service)):
    return await service.get_university_types()


@router.get("/type/{type}", response_model=List[UniversityViewModel], response_model_exclude_none=True)
async def get_universities_by_type(type: int, service: UniversityService = Depends(get_university_service)):
    university_type = parse_enum(UniversityType, type)
    if university_type is None:
        raise ValidationError(VALID_TYPES_MESSAGE, field="type")
    return await service.get_universities_by_type(university_type)


@router.get("/search/name", response_model=List[UniversityViewModel], response_model_exclude_none=True)
async def search_universities_by_name(
    search_term: Optional[str] = None,
    service: UniversityService = Depends(get_university_service)
):
    return await service.search_universities_by_name(search_term)


@router.get("/search", response_model=List[UniversityViewModel], response_model_exclude_none=True)
async def search_universities(
    search_term: Optional[str] = None,
    type: Optional[int] = None,
    governorate: Optional[int] = None,
    study_type: Optional[int] = None,
    min_fees: Optional[Decimal] = None,
    max_fees: Optional[Decimal] = None,
    min_coordination: Optional[Decimal] = None,
    max_coordination: Optional[Decimal] = None,
    college_name: Optional[str] = None,
    service: UniversityService = Depends(get_university_service)
):
    # Out-of-range enum values are ignored rather than rejected
    return await service.search_universities(
        search_term=search_term,
        type=parse_enum(UniversityType, type),
        governorate=parse_enum(Governorate, governorate),
        study_type=parse_enum(StudyType, study_type),
        min_fees=min_fees,
        max_fees=max_fees,
        min_coordination=min_coordination,
        max_coordination=max_coordination,
        college_name=college_name,
    )


@router.get("/{id}", response_model=UniversityViewModel, response_model_exclude_none=True)
async def get_university(id: int, service: UniversityService = Depends(get_university_service)):
    university = await service.get_university_by_id(id)
    if university is None:
        raise NotFoundError("University", id)
    return university


@router.get("/{id}/colleges", response_model=List[CollegeViewModel], response_model_exclude_none=True)
async def get_university_colleges(id: int, service: UniversityService = Depends(get_university_service)):
    if not await service.university_exists(id):
        raise NotFoundError("University", id)
    return await service.get_colleges_by_university_id(id)


# --- UNIVERSITIES (Admin only) ---

@router.post("", response_model=UniversityViewModel, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_university(
    payload: CreateUniversityDto,
    response: Response,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    university = await service.create_university(payload)
    response.headers["Location"] = f"/api/universities/{university.id}"
    return university


@router.put("", response_model=UniversityViewModel, response_model_exclude_none=True)
async def update_university(
    payload: UpdateUniversityDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    _require_id(payload.id, "University")
    return await service.update_university(payload)


@router.patch("/{id}", response_model=UniversityViewModel, response_model_exclude_none=True)
async def patch_university(
    id: int,
    payload: UpdateUniversityDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    payload.id = id
    return await service.update_university(payload)


@router.delete("/{id}")
async def delete_university(
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    if not await service.delete_university(id):
        raise NotFoundError("University", id)
    return {"message": "University deleted successfully"}


# --- COLLEGES (Admin only) ---

@router.post("/colleges", response_model=CollegeViewModel, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_college(
    payload: CreateCollegeDto,
    response: Response,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    college = await service.create_college(payload)
    response.headers["Location"] = f"/api/colleges/{college.id}"
    return college


@router.put("/colleges", response_model=CollegeViewModel, response_model_exclude_none=True)
async def update_college(
    payload: UpdateCollegeDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    _require_id(payload.id, "College")
    return await service.update_college(payload)


@router.patch("/colleges/{id}", response_model=CollegeViewModel, response_model_exclude_none=True)
async def patch_college(
    id: int,
    payload: UpdateCollegeDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    payload.id = id
    return await service.update_college(payload)


@router.delete("/colleges/{id}")
async def delete_college(
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    if not await service.delete_college(id):
        raise NotFoundError("College", id)
    return {"message": "College deleted successfully"}


# --- DEPARTMENTS (Admin only) ---

@router.post("/departments", response_model=DepartmentViewModel, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_department(
    payload: CreateDepartmentDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    return await service.create_department(payload)


@router.put("/departments", response_model=DepartmentViewModel, response_model_exclude_none=True)
async def update_department(
    payload: UpdateDepartmentDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    _require_id(payload.id, "Department")
    return await service.update_department(payload)


@router.patch("/departments/{id}", response_model=DepartmentViewModel, response_model_exclude_none=True)
async def patch_department(
    id: int,
    payload: UpdateDepartmentDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    payload.id = id
    return await service.update_department(payload)


@router.delete("/departments/{id}")
async def delete_department(
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    if not await service.delete_department(id):
        raise NotFoundError("Department", id)
    return {"message": "Department deleted successfully"}


# --- BRANCHES (Admin only) ---

@router.post("/{university_id}/branches", response_model=BranchViewModel, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_branch(
    university_id: int,
    payload: CreateBranchDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    return await service.create_branch(university_id, payload)


@router.put("/{university_id}/branches", response_model=BranchViewModel, response_model_exclude_none=True)
async def update_branch(
    university_id: int,
    payload: UpdateBranchDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    _require_id(payload.id, "Branch")
    return await service.update_branch(university_id, payload)


@router.patch("/{university_id}/branches/{id}", response_model=BranchViewModel, response_model_exclude_none=True)
async def patch_branch(
    university_id: int,
    id: int,
    payload: UpdateBranchDto,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    payload.id = id
    return await service.update_branch(university_id, payload)


@router.delete("/branches/{id}")
async def delete_branch(
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(get_current_admin_user)
):
    if not await service.delete_branch(id):
        raise NotFoundError("Branch", id)
    return {"message": "Branch deleted successfully"}
