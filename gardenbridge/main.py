"""
Diagnostics FastAPI application for GardenBridge.

Hosts a GardenPlatform on an in-memory host bridge so the Gardena
integration can be exercised locally: the application lifespan drives the
platform's start and shutdown, and the routes expose its devices.
"""

import asyncio
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from gardenbridge.application.api.routes import devices, health
from gardenbridge.application.models import APIConfig, ErrorResponse
from gardenbridge.core.platform import GardenPlatform
from gardenbridge.infrastructure.host import InMemoryHostBridge
from gardenbridge.infrastructure.logging.config import configure_logging
from gardenbridge.shared.exceptions import GardenBridgeError, get_http_status_code, should_log_error

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for platform startup and shutdown."""
    platform: GardenPlatform = app.state.platform

    logger.info("Starting GardenBridge application...")
    await platform.on_start("startup")
    await platform.on_configure()
    logger.info("GardenBridge application started", devices=len(platform.registry))

    yield

    logger.info("Shutting down GardenBridge application...")
    await platform.on_shutdown("shutdown")
    logger.info("GardenBridge application shut down")


def create_application(
    platform: Optional[GardenPlatform] = None,
    config: Optional[APIConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or APIConfig()

    if platform is None:
        configure_logging(config.log_level, json_logs=config.json_logs)
        platform = GardenPlatform(InMemoryHostBridge(), config.platform_config())

    app = FastAPI(
        title=config.title,
        version=config.version,
        description=config.description,
        docs_url=config.docs_url,
        openapi_url=config.openapi_url,
        lifespan=lifespan
    )
    app.state.platform = platform

    setup_middleware(app)
    setup_exception_handlers(app)
    setup_routes(app)

    return app


def setup_middleware(app: FastAPI) -> None:
    """Configure application middleware."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests with correlation IDs."""
        correlation_id = request.headers.get("X-Correlation-ID") or f"req_{id(request)}"

        with structlog.contextvars.bound_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        ):
            start_time = asyncio.get_running_loop().time()
            try:
                response = await call_next(request)
            except Exception as e:
                duration = asyncio.get_running_loop().time() - start_time
                logger.error("Request failed", error=str(e), duration_ms=round(duration * 1000, 2))
                raise

            response.headers["X-Correlation-ID"] = correlation_id
            duration = asyncio.get_running_loop().time() - start_time
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2)
            )
            return response


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers."""

    @app.exception_handler(GardenBridgeError)
    async def gardenbridge_exception_handler(request: Request, exc: GardenBridgeError):
        """Handle GardenBridge custom exceptions."""
        status_code = get_http_status_code(exc)

        if should_log_error(exc):
            logger.error(
                "GardenBridge error occurred",
                error_type=type(exc).__name__,
                error_message=exc.message,
                error_code=exc.error_code,
                status_code=status_code
            )

        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=exc.message,
                detail=str(exc.details) if exc.details else None,
                code=exc.error_code
            ).model_dump()
        )


def setup_routes(app: FastAPI) -> None:
    """Setup application routes."""
    app.include_router(health.router, prefix="/api/v1/health", tags=["Health"])
    app.include_router(devices.router, prefix="/api/v1/devices", tags=["Devices"])

    @app.get("/", response_model=Dict[str, Any])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "GardenBridge API",
            "version": app.version,
            "description": "Gardena smart garden bridge diagnostics",
            "endpoints": {
                "docs": "/docs",
                "health": "/api/v1/health",
                "devices": "/api/v1/devices",
            }
        }


def run() -> None:
    """Development server entry point."""
    import uvicorn

    uvicorn.run(
        "gardenbridge.main:create_application",
        factory=True,
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", "8000")),
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    run()
