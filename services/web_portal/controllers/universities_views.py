# services/web_portal/controllers/universities_views.py
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

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
from services.university_directory.schemas.colleges import CreateCollegeDto, UpdateCollegeDto
from services.university_directory.schemas.universities import CreateUniversityDto, UpdateUniversityDto
from services.web_portal.rendering import (
    form_errors,
    form_values,
    parse_decimal,
    parse_int,
    render,
)
from shared.auth import require_web_admin
from shared.exceptions import NotFoundError, TansiqyError

router = APIRouter(prefix="/universities", tags=["Web"], include_in_schema=False)

UNIVERSITY_FORM_FIELDS = [
    "name_ar", "name_en", "type", "official_website", "location", "governorate",
    "last_year_coordination", "fees", "information_sources", "description",
]

COLLEGE_FORM_FIELDS = [
    "name_ar", "name_en", "university_id", "official_website", "location", "description",
    "fees", "last_year_coordination", "fees_category_a", "fees_category_b", "fees_category_c",
    "fees_per_hour", "minimum_hours_per_semester", "additional_fees",
]


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


# --- BROWSING ---

@router.get("", response_class=HTMLResponse)
async def universities_by_type(
    request: Request,
    type: Optional[str] = None,
    service: UniversityService = Depends(get_university_service)
):
    university_type = parse_enum(UniversityType, parse_int(type))
    if university_type is None:
        return _redirect("/universities/select-type")

    universities = await service.get_universities_by_type(university_type)
    return render(request, "universities/index.html", {
        "universities": universities,
        "university_type": university_type,
    })


@router.get("/select-type", response_class=HTMLResponse)
async def select_type(request: Request, service: UniversityService = Depends(get_university_service)):
    return render(request, "universities/select_type.html", {"types": await service.get_university_types()})


@router.get("/details/{id}", response_class=HTMLResponse)
async def university_details(request: Request, id: int, service: UniversityService = Depends(get_university_service)):
    university = await service.get_university_by_id(id)
    if university is None:
        raise NotFoundError("University", id)
    return render(request, "universities/details.html", {"university": university})


@router.get("/colleges/{id}", response_class=HTMLResponse)
async def university_colleges(request: Request, id: int, service: UniversityService = Depends(get_university_service)):
    if not await service.university_exists(id):
        raise NotFoundError("University", id)
    colleges = await service.get_colleges_by_university_id(id)
    return render(request, "universities/colleges.html", {"colleges": colleges, "university_id": id})


@router.get("/college-details/{id}", response_class=HTMLResponse)
async def college_details(request: Request, id: int, service: UniversityService = Depends(get_university_service)):
    college = await service.get_college_by_id(id)
    if college is None:
        raise NotFoundError("College", id)
    return render(request, "universities/college_details.html", {"college": college})


@router.get("/departments/{id}", response_class=HTMLResponse)
async def college_departments(request: Request, id: int, service: UniversityService = Depends(get_university_service)):
    college = await service.get_college_by_id(id)
    if college is None:
        raise NotFoundError("College", id)
    return render(request, "universities/departments.html", {
        "college": college,
        "departments": college.departments,
    })


@router.get("/search", response_class=HTMLResponse)
async def search(
    request: Request,
    search_term: Optional[str] = None,
    type: Optional[str] = None,
    governorate: Optional[str] = None,
    study_type: Optional[str] = None,
    min_fees: Optional[str] = None,
    max_fees: Optional[str] = None,
    min_coordination: Optional[str] = None,
    max_coordination: Optional[str] = None,
    college_name: Optional[str] = None,
    service: UniversityService = Depends(get_university_service)
):
    # Blank form inputs arrive as empty strings, so everything is parsed leniently
    filters = {
        "search_term": (search_term or "").strip() or None,
        "type": parse_enum(UniversityType, parse_int(type)),
        "governorate": parse_enum(Governorate, parse_int(governorate)),
        "study_type": parse_enum(StudyType, parse_int(study_type)),
        "min_fees": parse_decimal(min_fees),
        "max_fees": parse_decimal(max_fees),
        "min_coordination": parse_decimal(min_coordination),
        "max_coordination": parse_decimal(max_coordination),
        "college_name": (college_name or "").strip() or None,
    }
    universities = await service.search_universities(**filters)
    return render(request, "universities/search.html", {"universities": universities, "filters": filters})


# --- UNIVERSITY ADMIN ---

@router.get("/create", response_class=HTMLResponse)
async def create_university_form(request: Request, current_user: dict = Depends(require_web_admin)):
    return render(request, "universities/form.html", {"form": {}, "errors": [], "university_id": None})


@router.post("/create", response_class=HTMLResponse)
async def create_university(
    request: Request,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(require_web_admin)
):
    values = form_values(await request.form(), UNIVERSITY_FORM_FIELDS, enum_fields=("type", "governorate"))
    context = {"form": values, "university_id": None}

    try:
        dto = CreateUniversityDto(**values)
    except PydanticValidationError as exc:
        return render(request, "universities/form.html", {**context, "errors": form_errors(exc)}, status_code=400)

    try:
        university = await service.create_university(dto)
    except TansiqyError as exc:
        return render(request, "universities/form.html", {**context, "errors": [exc.message]}, status_code=exc.status_code)

    return _redirect(f"/universities/details/{university.id}")


@router.get("/edit/{id}", response_class=HTMLResponse)
async def edit_university_form(
    request: Request,
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(require_web_admin)
):
    university = await service.get_university_by_id(id)
    if university is None:
        raise NotFoundError("University", id)
    form = university.model_dump(include=set(UNIVERSITY_FORM_FIELDS), exclude_none=True)
    return render(request, "universities/form.html", {"form": form, "errors": [], "university_id": id})


@router.post("/edit/{id}", response_class=HTMLResponse)
async def edit_university(
    request: Request,
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(require_web_admin)
):
    values = form_values(await request.form(), UNIVERSITY_FORM_FIELDS, enum_fields=("type", "governorate"))
    context = {"form": values, "university_id": id}

    try:
        dto = UpdateUniversityDto(id=id, **values)
    except PydanticValidationError as exc:
        return render(request, "universities/form.html", {**context, "errors": form_errors(exc)}, status_code=400)

    try:
        university = await service.update_university(dto)
    except TansiqyError as exc:
        return render(request, "universities/form.html", {**context, "errors": [exc.message]}, status_code=exc.status_code)

    return _redirect(f"/universities/details/{university.id}")


@router.post("/delete/{id}")
async def delete_university(
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(require_web_admin)
):
    if not await service.delete_university(id):
        raise NotFoundError("University", id)
    return _redirect("/")


# --- COLLEGE ADMIN ---

@router.get("/create-college", response_class=HTMLResponse)
async def create_college_form(
    request: Request,
    university_id: Optional[int] = None,
    current_user: dict = Depends(require_web_admin)
):
    form = {"university_id": university_id} if university_id else {}
    return render(request, "universities/college_form.html", {"form": form, "errors": [], "college_id": None})


@router.post("/create-college", response_class=HTMLResponse)
async def create_college(
    request: Request,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(require_web_admin)
):
    values = form_values(await request.form(), COLLEGE_FORM_FIELDS)
    context = {"form": values, "college_id": None}

    try:
        dto = CreateCollegeDto(**values)
    except PydanticValidationError as exc:
        return render(request, "universities/college_form.html", {**context, "errors": form_errors(exc)}, status_code=400)

    try:
        college = await service.create_college(dto)
    except TansiqyError as exc:
        return render(request, "universities/college_form.html", {**context, "errors": [exc.message]}, status_code=exc.status_code)

    return _redirect(f"/universities/college-details/{college.id}")


@router.get("/edit-college/{id}", response_class=HTMLResponse)
async def edit_college_form(
    request: Request,
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(require_web_admin)
):
    college = await service.get_college_by_id(id)
    if college is None:
        raise NotFoundError("College", id)
    form = college.model_dump(include=set(COLLEGE_FORM_FIELDS), exclude_none=True)
    return render(request, "universities/college_form.html", {"form": form, "errors": [], "college_id": id})


@router.post("/edit-college/{id}", response_class=HTMLResponse)
async def edit_college(
    request: Request,
    id: int,
    service: UniversityService = Depends(get_university_service),
    current_user: dict = Depends(require_web_admin)
):
    values = form_values(await request.form(), COLLEGE_FORM_FIELDS)
    context = {"form": values, "college_id": id}

    try:
        dto = UpdateCollegeDto(id=id, **values)
    except PydanticValidationError as exc:
        return render(request, "universities/college_form.html", {**context, "errors": form_errors(exc)}, status_code=400)

    try:
        college = await service.update_college(dto)
    except TansiqyError as exc:
        return render(request, "universities/college_form.html", {**context, "errors": [exc.message]}, status_code=exc.status_code)

    return _redirect(f"/universities/college-details/{college.id}")
