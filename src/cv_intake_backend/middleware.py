import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

access_logger = logging.getLogger("cv_intake_backend.access")
logger = logging.getLogger(__name__)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request with method, path, status and latency.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            client = request.client.host if request.client else "-"
            access_logger.info(f"{client} {request.method} {request.url.path} {status_code} {elapsed_ms:.1f}ms")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn an unexpected fault into a JSON 500 instead of dropping the connection."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
