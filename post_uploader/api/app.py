"""FastAPI application factory for the Post Uploader API.

This module provides the main application factory with OpenAPI documentation,
CORS configuration, and error handling.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import API_KEY_HEADER, Settings
from ..models import APIResponse
from ..observability import MetricsMiddleware, get_metrics_registry
from .dependencies import get_settings, set_settings
from .routes import router

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse(success=False, message=message).model_dump(exclude_none=True),
    )


def create_app(
    settings: Optional[Settings] = None,
    title: str = "Post Uploader API",
    description: str = "Upload markdown posts to a Jekyll _posts directory with normalized front matter",
    version: str = "0.1.0",
    enable_cors: bool = True,
    cors_origins: Optional[List[str]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Service settings. Read from the environment when omitted.
        title: API title for OpenAPI docs.
        description: API description for OpenAPI docs.
        version: API version.
        enable_cors: Whether to enable CORS middleware.
        cors_origins: List of allowed CORS origins.

    Returns:
        Configured FastAPI application.
    """
    if settings is not None:
        set_settings(settings)
    settings = get_settings()
    if not settings.api_key:
        logger.warning("API_KEY is not set; requests without an API key will be accepted")

    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=[
            {
                "name": "posts",
                "description": "Markdown post upload and management",
            },
        ],
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins or ["*"],
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", API_KEY_HEADER],
        )

    app.add_middleware(MetricsMiddleware)

    app.include_router(router)

    @app.get("/", tags=["root"])
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": title,
            "version": version,
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    @app.get("/metrics", tags=["observability"])
    async def metrics() -> dict:
        """Metrics endpoint."""
        return get_metrics_registry().get_all_metrics()

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        """Render HTTP errors in the standard response envelope."""
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Render malformed requests in the standard response envelope."""
        logger.debug(f"Invalid request to {request.url.path}: {exc.errors()}")
        if any("file" in error.get("loc", ()) for error in exc.errors()):
            return _error_response(400, "Error retrieving file")
        return _error_response(400, "Invalid request")

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}")
        return _error_response(500, "Internal server error")

    logger.info(f"Created FastAPI app: {title} v{version} (posts dir: {settings.posts_dir})")
    return app
