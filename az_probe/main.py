"""FastAPI application for the AZ reporting service.

This is the endpoint the probe targets: every pod answers /api/az with
the availability zone of the node it runs on.
"""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from az_probe.api.dependencies import cleanup_services, init_services
from az_probe.api.routes import az, health
from az_probe.core.config import Settings, get_settings
from az_probe.core.exceptions import InternalError, ServiceError
from az_probe.core.logging import configure_logging, get_logger
from az_probe.services.node_metadata import KubeNodeClient

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    node_client: KubeNodeClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the environment.
        node_client: Kubernetes node client to use instead of the
            in-cluster one.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(level=settings.log_level, format=settings.log_format)
        logger.info(
            "Starting AZ reporting service",
            env=settings.app_env.value,
            host=settings.app_host,
            port=settings.app_port,
            refresh_interval_sec=settings.az_refresh_interval_sec,
        )

        try:
            await init_services(settings, client=node_client)
        except ServiceError as e:
            logger.error("Failed to initialize services", error=e.message)
            raise

        yield

        logger.info("Shutting down AZ reporting service")
        await cleanup_services()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="AZ Reporting Service",
        description="Reports the availability zone of the serving node",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url=None,
    )
    app.state.settings = settings

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        """Handle ServiceError exceptions with structured response."""
        logger.warning(
            "Service error",
            error_type=type(exc).__name__,
            message=exc.message,
            status=exc.status.value,
        )
        return JSONResponse(status_code=exc.code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "Unexpected error",
            error_type=type(exc).__name__,
            error=str(exc),
            exc_info=True,
        )
        error = InternalError()
        return JSONResponse(status_code=error.code, content=error.to_dict())

    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next):
        """Bind a request ID to the logging context and echo it back."""
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    app.include_router(az.router)
    app.include_router(health.router)

    app.mount("/metrics", make_asgi_app())

    return app


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "az_probe.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        access_log=False,
    )


if __name__ == "__main__":
    run()
