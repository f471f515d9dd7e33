"""
Application exceptions.

Services raise these; the handlers registered in main.py turn them into
HTTP responses (JSON under /api, an error page elsewhere).
"""

from typing import Any, Dict, Optional


class TansiqyError(Exception):
    """Base exception for all application errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details
        }


class NotFoundError(TansiqyError):
    """A referenced id does not resolve to a live row"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} with ID {resource_id} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ValidationError(TansiqyError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class AuthenticationError(TansiqyError):
    status_code = 401

    def __init__(self, message: str = "Invalid authentication credentials"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(TansiqyError):
    status_code = 403

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(message, code="NOT_AUTHORIZED")


class LoginRequired(Exception):
    """Raised by web dependencies; redirects the browser to the login page"""

    def __init__(self, return_url: str = "/"):
        self.return_url = return_url
        super().__init__(return_url)


class AccessDenied(Exception):
    """Raised by web dependencies when a signed-in user lacks the Admin role"""
