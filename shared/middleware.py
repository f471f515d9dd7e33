"""
Tansiqy - HTTP Middleware
Request logging with correlation ids, and a passive in-memory response cache
"""

import re
import time
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Pattern, Set, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from shared.config import settings
from shared.logging_config import generate_request_id, logger, set_request_id


# Paths that should skip detailed logging
SKIP_LOGGING_PATHS: Set[str] = {
    "/health",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
}


def should_skip_logging(path: str) -> bool:
    if path in SKIP_LOGGING_PATHS:
        return True
    if path.startswith("/static/"):
        return True
    return False


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with its duration and tags it with a request id.

    The id comes from the X-Request-ID header when the caller sends one and
    is echoed back together with X-Response-Time.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        path = request.url.path
        skip_logging = should_skip_logging(path)
        start_time = time.perf_counter()

        if not skip_logging:
            client_ip = request.client.host if request.client else "unknown"
            logger.info(
                f"→ {request.method} {path}",
                extra={
                    "event_type": "http_request_start",
                    "http_method": request.method,
                    "http_path": path,
                    "client_ip": client_ip,
                }
            )

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

            if not skip_logging:
                status_code = response.status_code
                if status_code >= 500:
                    log_func = logger.error
                elif status_code >= 400:
                    log_func = logger.warning
                else:
                    log_func = logger.info

                log_func(
                    f"← {request.method} {path} - {status_code} ({duration_ms:.2f}ms)",
                    extra={
                        "event_type": "http_request_complete",
                        "http_method": request.method,
                        "http_path": path,
                        "http_status": status_code,
                        "duration_ms": duration_ms,
                    }
                )

            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"✗ {request.method} {path} - Exception ({duration_ms:.2f}ms): {type(exc).__name__}",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": request.method,
                    "http_path": path,
                    "duration_ms": duration_ms,
                }
            )
            raise

        finally:
            set_request_id("")


# --- RESPONSE CACHE ---

# (path pattern, seconds)
CACHE_RULES: List[Tuple[str, int]] = [
    (r"^/$", 300),
    (r"^/universities$", 180),
    (r"^/api/universities/types$", 300),
    (r"^/api/universities/type/[^/]+$", 180),
    (r"^/api/universities/search/name$", 120),
    (r"^/api/universities/search$", 120),
    (r"^/api/universities/\d+$", 300),
    (r"^/api/universities/\d+/colleges$", 180),
    (r"^/api/news/?$", 300),
    (r"^/api/news/\d+$", 300),
]


class ResponseCache:
    """
    Process-local store of rendered responses keyed by path and query string.

    Expired entries are purged on every write and the store never holds more
    than max_entries (0 means unbounded); the oldest insertions are evicted first.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries if max_entries is not None else settings.RESPONSE_CACHE_MAX_ENTRIES
        self._entries: "OrderedDict[str, Tuple[float, int, Dict[str, str], bytes]]" = OrderedDict()

    def get(self, key: str):
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[0] <= time.monotonic():
            del self._entries[key]
            return None
        return entry

    def purge_expired(self) -> None:
        now = time.monotonic()
        for key in [k for k, entry in self._entries.items() if entry[0] <= now]:
            del self._entries[key]

    def set(self, key: str, ttl: int, status_code: int, headers: Dict[str, str], body: bytes) -> None:
        self.purge_expired()
        self._entries.pop(key, None)
        while self.max_entries > 0 and len(self._entries) >= self.max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = (time.monotonic() + ttl, status_code, headers, body)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


response_cache = ResponseCache()


class ResponseCacheMiddleware(BaseHTTPMiddleware):
    """
    Serves repeated anonymous GETs for the configured routes from memory.

    Entries are never invalidated on writes; they simply expire.
    """

    def __init__(
        self,
        app: ASGIApp,
        rules: Optional[List[Tuple[str, int]]] = None,
        cache: Optional[ResponseCache] = None,
        enabled: Optional[bool] = None,
    ):
        super().__init__(app)
        self.rules: List[Tuple[Pattern, int]] = [
            (re.compile(pattern), ttl) for pattern, ttl in (rules if rules is not None else CACHE_RULES)
        ]
        self.cache = cache if cache is not None else response_cache
        self.enabled = settings.RESPONSE_CACHE_ENABLED if enabled is None else enabled

    def ttl_for(self, path: str) -> Optional[int]:
        for pattern, ttl in self.rules:
            if pattern.match(path):
                return ttl
        return None

    def _is_cacheable_request(self, request: Request) -> bool:
        if request.method != "GET":
            return False
        if "authorization" in request.headers:
            return False
        if settings.SESSION_COOKIE_NAME in request.cookies:
            return False
        return True

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled or not self._is_cacheable_request(request):
            return await call_next(request)

        ttl = self.ttl_for(request.url.path)
        if ttl is None:
            return await call_next(request)

        key = request.url.path
        if request.url.query:
            key = f"{key}?{request.url.query}"

        cached = self.cache.get(key)
        if cached is not None:
            _, status_code, headers, body = cached
            response = Response(content=body, status_code=status_code, headers=headers)
            response.headers["X-Cache"] = "HIT"
            return response

        response = await call_next(request)
        if response.status_code != 200:
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        headers = dict(response.headers)
        headers["cache-control"] = f"public, max-age={ttl}"
        self.cache.set(key, ttl, response.status_code, headers, body)

        fresh = Response(content=body, status_code=response.status_code, headers=headers)
        fresh.headers["X-Cache"] = "MISS"
        return fresh
