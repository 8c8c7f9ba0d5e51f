from typing import Dict, Any, Optional
import logging

from fastapi import status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RenderApiError(Exception):
    """Base exception class for render service errors."""

    def __init__(self, message: str, error_code: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidRequestError(RenderApiError):
    """Raised when render parameters fail validation. No browser is touched."""

    def __init__(self, message: str = "Missing or invalid url param", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_REQUEST", details)


class AuthenticationError(RenderApiError):
    """Raised when the bearer token is missing or wrong."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "UNAUTHORIZED")


class NavigationError(RenderApiError):
    """A single navigation attempt failed. Recorded and retried."""

    def __init__(self, cause: str, strategy: str, attempt: int):
        self.cause = cause
        self.strategy = strategy
        self.attempt = attempt
        super().__init__(
            cause,
            "NAVIGATION_FAILED",
            {"strategy": strategy, "attempt": attempt},
        )


class SelectorTimeoutError(NavigationError):
    """The requested selector never appeared. Ends the attempt like a navigation failure."""

    def __init__(self, cause: str, strategy: str, attempt: int, selector: str):
        super().__init__(cause, strategy, attempt)
        self.selector = selector
        self.error_code = "SELECTOR_TIMEOUT"
        self.details["selector"] = selector


class QuiescenceTimeoutError(RenderApiError):
    """Network never went quiet within its bound. Never ends an attempt."""

    def __init__(self, cause: str):
        super().__init__(cause, "QUIESCENCE_TIMEOUT")


class RetryExhaustedError(RenderApiError):
    """Every round and strategy failed."""

    def __init__(self, last_failure: Optional[NavigationError] = None):
        self.last_failure = last_failure
        details = {}
        if last_failure is not None:
            details = {"strategy": last_failure.strategy, "attempt": last_failure.attempt}
        super().__init__("Render timed out", "RENDER_TIMEOUT", details)

    @property
    def detail(self) -> str:
        return self.last_failure.cause if self.last_failure is not None else ""


class BrowserEnvironmentError(RenderApiError):
    """Browser, context or page could not be created. Never retried."""

    def __init__(self, cause: str):
        super().__init__(cause, "BROWSER_ENVIRONMENT_FAILURE")


class CleanupError(RenderApiError):
    """Releasing a browser resource failed. Logged only."""

    def __init__(self, cause: str):
        super().__init__(cause, "CLEANUP_FAILED")


# Error code definitions
ERROR_CODES = {
    "INVALID_REQUEST": {
        "code": "INVALID_REQUEST",
        "message": "Missing or invalid url param",
        "http_status": status.HTTP_400_BAD_REQUEST,
        "category": "validation"
    },
    "UNAUTHORIZED": {
        "code": "UNAUTHORIZED",
        "message": "Unauthorized",
        "http_status": status.HTTP_401_UNAUTHORIZED,
        "category": "authentication"
    },
    "RENDER_TIMEOUT": {
        "code": "RENDER_TIMEOUT",
        "message": "Render timed out",
        "http_status": status.HTTP_504_GATEWAY_TIMEOUT,
        "category": "render"
    },
    "BROWSER_ENVIRONMENT_FAILURE": {
        "code": "BROWSER_ENVIRONMENT_FAILURE",
        "message": "Browser could not be started.",
        "http_status": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "category": "system"
    },
    "INTERNAL_SERVER_ERROR": {
        "code": "INTERNAL_SERVER_ERROR",
        "message": "An internal server error occurred.",
        "http_status": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "category": "system"
    },
}


def error_response(error: RenderApiError, detail: Optional[str] = None) -> JSONResponse:
    """Render a RenderApiError as the service's JSON error body."""
    error_info = ERROR_CODES.get(error.error_code, ERROR_CODES["INTERNAL_SERVER_ERROR"])

    body: Dict[str, Any] = {
        "error": error.message,
        "error_code": error.error_code,
    }
    if detail is not None:
        body["detail"] = detail

    return JSONResponse(status_code=error_info["http_status"], content=body)
