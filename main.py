from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from services.university_directory.api.auth_router import router as auth_router
from services.university_directory.api.colleges_router import router as colleges_router
from services.university_directory.api.news_router import router as news_router
from services.university_directory.api.universities_router import router as universities_router
from services.web_portal.controllers.account_views import router as account_views
from services.web_portal.controllers.home_views import router as home_views
from services.web_portal.controllers.universities_views import router as universities_views
from services.web_portal.controllers.users_views import router as users_views
from services.web_portal.rendering import STATIC_DIR, render
from shared.config import settings
from shared.db import close_db
from shared.exceptions import AccessDenied, LoginRequired, TansiqyError
from shared.logging_config import get_request_id, logger
from shared.middleware import RequestLoggingMiddleware, ResponseCacheMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="University and college directory with coordination and fee search",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware (last added runs first): logging wraps the cache so hits are logged too
app.add_middleware(ResponseCacheMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time", "X-Cache", "Token-Expired"],
)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


# --- ERROR RESPONSES ---

def is_api_request(request: Request) -> bool:
    return request.url.path.startswith("/api")


def error_response(
    request: Request,
    status_code: int,
    message: str,
    code: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None
):
    """JSON body for API callers, the error page for browsers"""
    if is_api_request(request):
        return JSONResponse(
            status_code=status_code,
            content={"message": message, "code": code, "details": details or {}},
            headers=headers,
        )
    response = render(request, "error.html", {
        "status_code": status_code,
        "message": message,
        "request_id": get_request_id(),
    }, status_code=status_code)
    if headers:
        response.headers.update(headers)
    return response


@app.exception_handler(TansiqyError)
async def tansiqy_exception_handler(request: Request, exc: TansiqyError):
    logger.warning(f"{exc.code}: {exc.message}", extra={"error_code": exc.code, "http_path": request.url.path})
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(request, exc.status_code, exc.message, exc.code, exc.details, headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(
        request,
        exc.status_code,
        str(exc.detail),
        code=f"HTTP_{exc.status_code}",
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "One or more validation errors occurred",
        code="VALIDATION_ERROR",
        details={"errors": errors},
    )


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def database_unavailable_handler(request: Request, exc: Exception):
    logger.error(f"Database error: {exc}", exc_info=True)
    return error_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Database service is temporarily unavailable",
        code="DATABASE_UNAVAILABLE",
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    details = {"error": str(exc)} if settings.DEBUG else None
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An error occurred while processing your request",
        code="INTERNAL_ERROR",
        details=details,
    )


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse(
        f"/account/login?return_url={quote(exc.return_url, safe='')}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied):
    return RedirectResponse("/account/access-denied", status_code=status.HTTP_303_SEE_OTHER)


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
    }


# JSON API
app.include_router(auth_router)
app.include_router(universities_router)
app.include_router(colleges_router)
app.include_router(news_router)

# Server-rendered pages
app.include_router(home_views)
app.include_router(universities_views)
app.include_router(account_views)
app.include_router(users_views)
