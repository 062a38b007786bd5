import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from modelshop import __version__
from modelshop.api.errors import register_exception_handlers
from modelshop.api.main import api_router
from modelshop.core.config import settings
from modelshop.core.db import init_db
from modelshop.core.observability import (
    REQUEST_COUNT,
    REQUEST_DURATION,
    get_logger,
    initialize_observability,
    set_correlation_id,
    set_user_id,
)
from modelshop.core.storage import file_storage

logger = get_logger(__name__)


def _endpoint_label(request: Request) -> str:
    # Route templates keep metric label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Middleware for request observability and metrics collection."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        user_id = request.headers.get("X-User-ID", "")
        if user_id:
            set_user_id(user_id)

        start_time = time.time()
        method = request.method

        logger.info(
            "Request started",
            method=method,
            path=request.url.path,
            correlation_id=correlation_id,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            endpoint = _endpoint_label(request)
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status="500").inc()
            REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)
            logger.error(
                "Request failed",
                method=method,
                path=request.url.path,
                duration_seconds=duration,
                correlation_id=correlation_id,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        endpoint = _endpoint_label(request)
        REQUEST_COUNT.labels(
            method=method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)

        response.headers["X-Correlation-ID"] = correlation_id

        logger.info(
            "Request completed",
            method=method,
            path=request.url.path,
            status_code=response.status_code,
            duration_seconds=duration,
            correlation_id=correlation_id,
        )
        return response


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting application initialization")

    try:
        initialize_observability()
        init_db()
        file_storage.ensure_root()

        logger.info(
            "Application started successfully",
            project_name=settings.PROJECT_NAME,
            environment=settings.ENVIRONMENT,
            upload_dir=str(settings.UPLOAD_DIR),
            metrics_enabled=settings.ENABLE_METRICS,
            metrics_port=settings.METRICS_PORT if settings.ENABLE_METRICS else None,
        )

        yield

    except Exception as e:
        logger.error("Application startup failed", error=str(e), exc_info=True)
        raise

    finally:
        logger.info("Shutting down application")


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        traces_sample_rate=1.0 if settings.ENVIRONMENT == "staging" else 0.1,
        environment=settings.ENVIRONMENT,
    )

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Model Shop Workflow API

    Work orders, their parts, task assignments of employees to parts and the
    notifications those assignments produce.

    ## Features

    * **Task lifecycle**: pending, ongoing, on hold and completed, race-free
    * **Part status**: derived from the assignments touching each part
    * **Assignment batches**: one transaction per task with partial reporting
    """,
    version=__version__,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(ObservabilityMiddleware)

if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router)
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)
