"""
Request context middleware.

Binds the X-Correlation-ID of each request (generating one when absent),
echoes it on the response and logs the request with its timing. Request
headers are logged only at DEBUG level.

Dependencies: fastapi, starlette, document_service.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from document_service.observability.correlation import correlation_scope

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlation ID binding and access logging."""

    async def dispatch(self, request: Request, call_next) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            start = time.perf_counter()
            logger.info(f"{request.method} {request.url.path}")
            if logger.isEnabledFor(logging.DEBUG):
                for name, value in request.headers.items():
                    logger.debug(f"Header {name}: {value}")

            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    f"{request.method} {request.url.path} - Unhandled error",
                    extra={"process_time_ms": round((time.perf_counter() - start) * 1000, 2)},
                )
                raise

            logger.info(
                f"{request.method} {request.url.path} - {response.status_code}",
                extra={
                    "status_code": response.status_code,
                    "process_time_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
