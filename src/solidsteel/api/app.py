"""FastAPI application factory."""

import time
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from solidsteel import __version__
from solidsteel import config as config_module
from solidsteel.api.rate_limit import limiter
from solidsteel.api.routes import (
    admin_auth_router,
    admin_router,
    blob_router,
    content_router,
    forms_router,
    monitoring_router,
    seo_router,
    uploads_router,
)
from solidsteel.api.schemas import HealthResponse
from solidsteel.storage.project_images import get_project_image_mapper

log = structlog.get_logger()


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log all HTTP requests with method, path, status, and timing."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        log.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
            client=request.client.host if request.client else None,
        )
        return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app with all routes and middleware.
    """
    settings = config_module.settings

    app = FastAPI(
        title="Solid Steel Management API",
        description="Content, lead forms and media for the Solid Steel Management website",
        version=__version__,
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
    )

    # Rate limiting
    app.state.limiter = limiter
    if settings.rate_limit_enabled:
        app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Global exception handler - sanitize all unhandled exceptions
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log full details, return a generic message with a reference id."""
        error_id = str(uuid.uuid4())[:8]

        log.error(
            "unhandled_exception",
            error_id=error_id,
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            error_message=str(exc),
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": f"An internal error occurred. Please try again later. (ref: {error_id})"
            },
        )

    # CORS - the public site plus any configured extras
    cors_origins = [settings.public_url.rstrip("/"), *settings.cors_origins]
    if settings.is_development:
        cors_origins += [f"http://localhost:{settings.server_port}", "http://localhost:3000"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(dict.fromkeys(cors_origins)),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Access logging
    app.add_middleware(AccessLogMiddleware)

    # Register routers
    app.include_router(content_router)
    app.include_router(forms_router)
    app.include_router(uploads_router)
    app.include_router(blob_router)
    app.include_router(admin_auth_router)
    app.include_router(admin_router)
    app.include_router(monitoring_router)
    app.include_router(seo_router)

    # Local blob backend objects are served by the app itself
    if settings.blob_backend == "local":
        settings.blob_local_dir.mkdir(parents=True, exist_ok=True)
        app.mount("/blob", StaticFiles(directory=settings.blob_local_dir), name="blob")

    @app.get("/health")
    async def health_check() -> HealthResponse:
        """Public health check - no auth required."""
        return HealthResponse(
            version=__version__,
            environment=settings.environment,
            details={
                "blobBackend": settings.blob_backend,
                "adminConfigured": settings.admin_configured,
                "crmConfigured": bool(settings.crm_webhook_quote_url),
                "imageCache": get_project_image_mapper().cache_stats(),
            },
        )

    log.info(
        "app_created",
        environment=settings.environment,
        blob_backend=settings.blob_backend,
        rate_limit=settings.rate_limit_enabled,
    )
    return app
