"""FastAPI middleware."""

import re
import time
import uuid
from typing_extensions import override

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from deepnotes.core.exceptions import AppError, SessionNotFoundError

logger = structlog.get_logger()

SESSION_PATH = re.compile(r"^/api/v1/sessions/([^/]+)")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with a request id and, where present, the session id.

    Both ids are bound to structlog context variables, so log lines emitted
    by the session components during the request carry them too.
    """

    SKIP_PATHS = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    @override
    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path in self.SKIP_PATHS:
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        match = SESSION_PATH.match(path)
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            session_id=match.group(1) if match else None,
        )

        start_time = time.perf_counter()
        logger.info("request_started", method=request.method, path=path)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=path,
                error=str(e),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "session_id")

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "request_completed",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            request_id=request_id,
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.2f}"
        return response


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turn exceptions escaping a route into JSON error bodies."""

    @override
    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except SessionNotFoundError as e:
            return JSONResponse(status_code=404, content=e.to_dict())
        except AppError as e:
            logger.exception("application_error", path=request.url.path, code=e.code)
            return JSONResponse(status_code=500, content=e.to_dict())
        except Exception as e:
            logger.exception("unhandled_exception", path=request.url.path, error=str(e))
            return JSONResponse(
                status_code=500,
                content={"error": {"code": "INTERNAL_ERROR", "message": str(e)}},
            )
