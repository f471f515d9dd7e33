# services/web_portal/controllers/users_views.py
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from services.university_directory.controllers.user_service import UserService, get_user_service
from services.university_directory.schemas.users import UserCreate, UserUpdate
from services.web_portal.rendering import form_errors, form_values, render
from shared.auth import require_web_admin
from shared.exceptions import NotFoundError, TansiqyError

router = APIRouter(
    prefix="/users",
    tags=["Web"],
    include_in_schema=False,
    dependencies=[Depends(require_web_admin)],
)

USER_FORM_FIELDS = ["email", "password", "full_name", "role"]


def _user_form(form) -> dict:
    values = form_values(form, USER_FORM_FIELDS)
    # unchecked checkboxes are simply absent from the body
    values["is_active"] = form.get("is_active") in ("on", "true", "1")
    return values


@router.get("", response_class=HTMLResponse)
async def list_users(request: Request, service: UserService = Depends(get_user_service)):
    return render(request, "users/index.html", {"users": await service.list_users()})


@router.get("/create", response_class=HTMLResponse)
async def create_user_form(request: Request):
    form = {"role": "Student", "is_active": True}
    return render(request, "users/form.html", {"form": form, "errors": [], "user_id": None})


@router.post("/create", response_class=HTMLResponse)
async def create_user(request: Request, service: UserService = Depends(get_user_service)):
    values = _user_form(await request.form())
    context = {"form": {k: v for k, v in values.items() if k != "password"}, "user_id": None}

    try:
        payload = UserCreate(**values)
    except PydanticValidationError as exc:
        return render(request, "users/form.html", {**context, "errors": form_errors(exc)}, status_code=400)

    try:
        await service.create_user(payload)
    except TansiqyError as exc:
        return render(request, "users/form.html", {**context, "errors": [exc.message]}, status_code=exc.status_code)

    return RedirectResponse("/users", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/edit/{id}", response_class=HTMLResponse)
async def edit_user_form(request: Request, id: int, service: UserService = Depends(get_user_service)):
    user = await service.get_user(id)
    if user is None:
        raise NotFoundError("User", id)
    form = {
        "email": user.email,
        "full_name": user.full_name or "",
        "role": user.role.value,
        "is_active": user.is_active,
    }
    return render(request, "users/form.html", {"form": form, "errors": [], "user_id": id})


@router.post("/edit/{id}", response_class=HTMLResponse)
async def edit_user(request: Request, id: int, service: UserService = Depends(get_user_service)):
    values = _user_form(await request.form())
    context = {"form": {k: v for k, v in values.items() if k != "password"}, "user_id": id}

    try:
        payload = UserUpdate(**values)
    except PydanticValidationError as exc:
        return render(request, "users/form.html", {**context, "errors": form_errors(exc)}, status_code=400)

    try:
        await service.update_user(id, payload)
    except TansiqyError as exc:
        return render(request, "users/form.html", {**context, "errors": [exc.message]}, status_code=exc.status_code)

    return RedirectResponse("/users", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/delete/{id}")
async def delete_user(id: int, service: UserService = Depends(get_user_service)):
    if not await service.delete_user(id):
        raise NotFoundError("User", id)
    return RedirectResponse("/users", status_code=status.HTTP_303_SEE_OTHER)
