import time
import uuid
from typing import Optional
import logging

from fastapi import Request

from .errors import AuthenticationError, error_response
from .logging_config import log_request_end

logger = logging.getLogger(__name__)


def bearer_auth_middleware(auth_token: Optional[str]):
    """Build the bearer-token gate. With no token configured it passes everything through."""
    expected = f"Bearer {auth_token}" if auth_token else None

    async def auth_middleware(request: Request, call_next):
        if expected is None:
            return await call_next(request)

        if request.headers.get("Authorization", "") == expected:
            return await call_next(request)

        logger.warning(
            "Rejected unauthenticated request",
            extra={"path": request.url.path, "request_id": getattr(request.state, "request_id", None)},
        )
        return error_response(AuthenticationError())

    return auth_middleware


# Performance monitoring middleware
async def performance_middleware(request: Request, call_next):
    """Middleware to tag requests with an ID and log their timing."""
    start_time = time.perf_counter()
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    log_request_end(
        logger,
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration=time.perf_counter() - start_time,
    )
    return response
