"""
FastAPI application for document ingestion.

create_app() wires logging, the request context middleware, the domain
error handler and the health and document routers.

Dependencies: fastapi, document_service.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from document_service import __version__
from document_service.api.deps.dependencies import get_service_cache
from document_service.configs import get_settings
from document_service.core.exceptions import DocumentServiceException
from document_service.observability.logger import configure_logging
from document_service.observability.middleware import RequestContextMiddleware

from .routers import documents_router, health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build AWS clients and the coordinator at startup, drop them on shutdown."""
    cache = get_service_cache()
    _ = cache.coordinator
    _ = cache.orphan_sweeper
    logger.info(f"{__name__}:lifespan - Ingestion services ready")

    yield

    cache.clear()
    logger.info(f"{__name__}:lifespan - Service cache cleared")


async def document_service_error_handler(request: Request, exc: DocumentServiceException) -> JSONResponse:
    """Render domain errors that escaped a route as a 500 with their message."""
    logger.error(
        f"{__name__}:document_service_error_handler - {type(exc).__name__}: {exc.message}",
        extra={"path": request.url.path},
    )
    return JSONResponse(status_code=500, content={"detail": exc.message})


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)

    app = FastAPI(
        title="Document Ingestion API",
        description="Stores claims documents and announces them to downstream consumers",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(DocumentServiceException, document_service_error_handler)

    app.include_router(health_router)
    app.include_router(documents_router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "document_service.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
