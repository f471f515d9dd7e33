# services/web_portal/rendering.py
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as PydanticValidationError

from services.university_directory.models.enums import (
    GOVERNORATE_LABELS,
    STUDY_TYPE_LABELS,
    UNIVERSITY_TYPE_LABELS,
    USER_ROLE_LABELS,
)
from shared.auth import ADMIN_ROLE, get_web_user
from shared.config import settings

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    app_name=settings.APP_NAME,
    university_types=[(int(t), label) for t, label in UNIVERSITY_TYPE_LABELS.items()],
    governorates=[(int(g), label) for g, label in GOVERNORATE_LABELS.items()],
    study_types=[(int(s), label) for s, label in STUDY_TYPE_LABELS.items()],
    user_roles=[(r.value, label) for r, label in USER_ROLE_LABELS.items()],
)


def render(request: Request, name: str, context: Optional[Dict[str, Any]] = None, status_code: int = 200):
    """TemplateResponse with the signed-in user exposed to every page"""
    current_user = get_web_user(request)
    page = {
        "current_user": current_user,
        "is_admin": bool(current_user and current_user["role"] == ADMIN_ROLE),
    }
    page.update(context or {})
    return templates.TemplateResponse(request, name, page, status_code=status_code)


# --- FORM HELPERS ---

def form_values(form, fields: Iterable[str], enum_fields: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Trimmed form values; blank inputs are left out so optional fields stay unset.

    Select boxes backed by integer enums post numeric strings; those are
    converted to int so the schema can resolve the enum member.
    """
    enum_fields = set(enum_fields)
    values: Dict[str, Any] = {}
    for field in fields:
        raw = form.get(field)
        if raw is None:
            continue
        raw = str(raw).strip()
        if raw == "":
            continue
        if field in enum_fields and raw.lstrip("-").isdigit():
            values[field] = int(raw)
        else:
            values[field] = raw
    return values


def form_errors(exc: PydanticValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return messages


def parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_decimal(value: Optional[str]) -> Optional[Decimal]:
    if value is None or value.strip() == "":
        return None
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        return None


def is_local_url(url: Optional[str]) -> bool:
    """Only same-site paths are accepted as post-login redirect targets"""
    if not url:
        return False
    if not url.startswith("/"):
        return False
    return not url.startswith("//") and not url.startswith("/\\")
