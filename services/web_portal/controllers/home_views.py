# services/web_portal/controllers/home_views.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from services.university_directory.controllers.university_service import (
    UniversityService,
    get_university_service,
)
from services.university_directory.models.enums import UniversityType
from services.web_portal.rendering import render

router = APIRouter(tags=["Web"], include_in_schema=False)

# Order of the cards on the landing page
HOME_TYPE_ORDER = [
    UniversityType.Governmental,
    UniversityType.Private,
    UniversityType.National,
    UniversityType.Technological,
    UniversityType.Foreign,
    UniversityType.HigherInstitute,
]


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, service: UniversityService = Depends(get_university_service)):
    types = {t.type: t for t in await service.get_university_types()}
    cards = [types[int(t)] for t in HOME_TYPE_ORDER]
    return render(request, "home.html", {"cards": cards})


@router.get("/privacy", response_class=HTMLResponse)
async def privacy(request: Request):
    return render(request, "privacy.html")
