"""
Main FastAPI application for the SDK bootstrap service.

The lifespan reads configuration, builds the service container and runs the
SDK start-up sequence before the first request is served. A failed sequence
does not stop the service: it starts degraded and reports the failing step
through the status and health routes until a retry succeeds.
"""

import asyncio
import os
import uuid
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry, Gauge
from prometheus_fastapi_instrumentator import Instrumentator, metrics
import structlog

from src.application.api.routes import health, sdk
from src.application.models import APIConfig, ErrorResponse
from src.core.use_cases.initialization import SequentialInitializer
from src.core.use_cases.sdk_startup import SDK_STEP_ORDER
from src.infrastructure.config import BootstrapConfig
from src.infrastructure.di.container import build_container
from src.infrastructure.logging.config import configure_logging
from src.shared.exceptions import (
    SDKBootError,
    StepInitializationError,
    get_http_status_code,
    should_log_error
)

logger = structlog.get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the container and run SDK start-up; tear both down on shutdown."""
    config = app.state.bootstrap_config or BootstrapConfig.from_env()
    configure_logging(config.log_level, config.log_format, secrets=config.secret_values())

    logger.info("Starting SDK bootstrap service", config=config.to_dict())

    container = await build_container(config, app.state.sdk_clients)
    app.state.container = container

    initializer = await container.resolve(SequentialInitializer)
    app.state.initializer = initializer
    try:
        status = await initializer.run_all()
        logger.info("SDK start-up finished", steps=status.steps)
    except StepInitializationError as e:
        logger.error("SDK start-up failed, serving degraded", step=e.step, error=e.message)

    yield

    logger.info("Shutting down SDK bootstrap service")
    await container.cleanup()
    app.state.container = None
    app.state.initializer = None


def create_application(
    config: Optional[BootstrapConfig] = None,
    sdk_clients: Optional[Dict[Any, Any]] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Service configuration; read from the environment at start-up when omitted
        sdk_clients: SDK client instances keyed by client protocol
    """
    api_config = APIConfig()

    app = FastAPI(
        title=api_config.title,
        version=api_config.version,
        description=api_config.description,
        docs_url=api_config.docs_url,
        redoc_url=api_config.redoc_url,
        openapi_url=api_config.openapi_url,
        lifespan=lifespan
    )
    app.state.bootstrap_config = config
    app.state.sdk_clients = sdk_clients
    app.state.container = None
    app.state.initializer = None

    setup_middleware(app, api_config)
    setup_prometheus_metrics(app)
    setup_exception_handlers(app)
    setup_routes(app, api_config)

    return app


def _startup_state(request: Request) -> Optional[str]:
    initializer = request.app.state.initializer
    return initializer.state.value if initializer is not None else None


def setup_middleware(app: FastAPI, config: APIConfig) -> None:
    """Configure CORS, compression and request logging."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=config.cors_methods,
        allow_headers=config.cors_headers,
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with a correlation ID and the SDK start-up state."""
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        loop = asyncio.get_running_loop()
        started = loop.time()

        with structlog.contextvars.bound_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        ):
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error("Request failed", error=str(e), duration_ms=round((loop.time() - started) * 1000, 2))
                raise

            response.headers[CORRELATION_HEADER] = correlation_id
            logger.info(
                "Request handled",
                status_code=response.status_code,
                sdk_state=_startup_state(request),
                duration_ms=round((loop.time() - started) * 1000, 2)
            )
            return response


def setup_exception_handlers(app: FastAPI) -> None:
    """Map service exceptions onto error responses."""

    @app.exception_handler(SDKBootError)
    async def sdkboot_exception_handler(request: Request, exc: SDKBootError):
        status_code = get_http_status_code(exc)

        if should_log_error(exc):
            logger.error(
                "Request failed with service error",
                error_type=type(exc).__name__,
                error_message=exc.message,
                error_code=exc.error_code,
                details=exc.details,
                status_code=status_code
            )

        body = ErrorResponse(
            error=exc.message,
            code=exc.error_code,
            step=getattr(exc, "step", None),
            details=exc.details or None
        )
        return JSONResponse(status_code=status_code, content=body.model_dump())

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unexpected error occurred",
            error_type=type(exc).__name__,
            error_message=str(exc),
            request_method=request.method,
            request_path=request.url.path
        )
        body = ErrorResponse(error="Internal server error", code="internal_error")
        return JSONResponse(status_code=500, content=body.model_dump())


def setup_routes(app: FastAPI, config: APIConfig) -> None:
    """Mount the SDK and health routers plus the service index."""

    app.include_router(sdk.router, prefix="/api/v1/sdk", tags=["SDK"])
    app.include_router(health.router, prefix="/api/v1/health", tags=["Health"])

    @app.get("/", response_model=Dict[str, Any])
    async def root():
        return {
            "name": config.title,
            "version": config.version,
            "startup_order": list(SDK_STEP_ORDER),
            "endpoints": {
                "docs": config.docs_url,
                "sdk_status": "/api/v1/sdk/status",
                "health": "/api/v1/health",
                "metrics": "/metrics",
            }
        }


def sdk_step_metrics(registry: CollectorRegistry) -> Callable[[metrics.Info], None]:
    """Per-step start-up gauge, refreshed on every instrumented request."""
    gauge = Gauge(
        "sdkboot_step_initialized",
        "Whether the SDK start-up step succeeded in the current run",
        labelnames=("step",),
        registry=registry
    )

    def instrumentation(info: metrics.Info) -> None:
        initializer = getattr(info.request.app.state, "initializer", None)
        if initializer is None:
            return
        for step, succeeded in initializer.status.steps.items():
            gauge.labels(step=step).set(1 if succeeded else 0)

    return instrumentation


def setup_prometheus_metrics(app: FastAPI) -> None:
    """Expose Prometheus metrics on /metrics when ENABLE_METRICS is set."""
    registry = CollectorRegistry()

    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics"],
        env_var_name="ENABLE_METRICS",
        inprogress_name="sdkboot_requests_inprogress",
        inprogress_labels=True,
        registry=registry,
    )
    instrumentator.add(metrics.default(metric_namespace="sdkboot", registry=registry))
    instrumentator.add(sdk_step_metrics(registry))

    instrumentator.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        log_config=None,
        access_log=False,
    )
