"""
Global Exception Handler Middleware for the Resume Screener API
"""
import time
import uuid
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from resume_screener.utils.exceptions import (
    GENERIC_FAILURE_MESSAGE,
    MalformedCompletionOutput,
    ScreenerBaseException,
    map_to_http_exception,
)
from resume_screener.utils.logging_config import get_logger, request_id_var

logger = get_logger(__name__)


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Global exception handler middleware"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        try:
            response = await call_next(request)

            logger.info(
                f"Request completed: {request.method} {request.url.path} - {response.status_code}",
                extra={"status_code": response.status_code}
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except ScreenerBaseException as exc:
            http_exc = map_to_http_exception(exc)
            log = logger.warning if http_exc.status_code < 500 else logger.error
            log(
                f"{exc.__class__.__name__} in {request.method} {request.url.path}: {exc.message}",
                extra={"error": exc.to_dict(), "status_code": http_exc.status_code}
            )
            if isinstance(exc, MalformedCompletionOutput):
                logger.debug(f"Unparseable completion: {exc.raw_text[:2000]}")

            return self._create_error_response(request_id, http_exc.status_code, http_exc.detail)

        except Exception as exc:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
                extra={"exception_type": exc.__class__.__name__},
                exc_info=True
            )

            return self._create_error_response(request_id, 500, {"error": GENERIC_FAILURE_MESSAGE})

        finally:
            request_id_var.reset(token)

    def _create_error_response(self, request_id: str, status_code: int, detail: Any) -> JSONResponse:
        """Create standardized error response: {"error": <text>, ...}"""

        if isinstance(detail, dict):
            body = dict(detail)
            body.setdefault("error", str(detail.get("message", GENERIC_FAILURE_MESSAGE)))
        else:
            body = {"error": str(detail)}
        body["request_id"] = request_id

        return JSONResponse(
            status_code=status_code,
            content=body,
            headers={"X-Request-ID": request_id}
        )


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Middleware for performance monitoring"""

    def __init__(self, app, slow_request_threshold: float = 10.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        processing_time = time.time() - start_time

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra={"processing_time": processing_time, "threshold": self.slow_request_threshold}
            )
        else:
            logger.debug(f"Request performance: {request.method} {request.url.path} - {processing_time:.3f}s")

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response
