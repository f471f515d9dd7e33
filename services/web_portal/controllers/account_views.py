# services/web_portal/controllers/account_views.py
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from services.university_directory.controllers.auth_service import (
    AuthService,
    get_auth_service,
    token_claims,
)
from services.web_portal.rendering import is_local_url, render
from shared.auth import ADMIN_ROLE, create_session_token
from shared.config import settings
from shared.logging_config import get_logger

logger = get_logger("web.account")

router = APIRouter(prefix="/account", tags=["Web"], include_in_schema=False)


def _is_configured_admin(email: str, password: str) -> bool:
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return False
    return (
        secrets.compare_digest(email.encode(), settings.ADMIN_EMAIL.encode())
        and secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
    )


def _signed_in_redirect(token: str, return_url: Optional[str]) -> RedirectResponse:
    target = return_url if is_local_url(return_url) else "/"
    response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.SESSION_EXPIRE_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
    )
    return response


@router.get("/login", response_class=HTMLResponse)
async def login_form(request: Request, return_url: Optional[str] = None):
    return render(request, "account/login.html", {"return_url": return_url, "email": "", "error": None})


@router.post("/login", response_class=HTMLResponse)
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    return_url: Optional[str] = Form(None),
    service: AuthService = Depends(get_auth_service)
):
    email = email.strip()
    context = {"return_url": return_url, "email": email}

    if not email or not password:
        return render(request, "account/login.html", {**context, "error": "البريد الإلكتروني وكلمة المرور مطلوبان"})

    user = await service.authenticate(email, password)
    if user is not None:
        return _signed_in_redirect(create_session_token(token_claims(user)), return_url)

    # Account configured through settings, usable before any user row exists
    if _is_configured_admin(email, password):
        logger.info("Configured admin logged in", extra={"email": email})
        token = create_session_token({"sub": email, "email": email, "role": ADMIN_ROLE})
        return _signed_in_redirect(token, return_url)

    return render(request, "account/login.html", {**context, "error": "البريد الإلكتروني أو كلمة المرور غير صحيحة"})


@router.post("/logout")
async def logout():
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/access-denied", response_class=HTMLResponse)
async def access_denied(request: Request):
    return render(request, "account/access_denied.html")
