import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, settings as default_settings
from .infrastructure.db import Database
from .infrastructure.logs import configure_logging
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.storage import SupabaseImageStorage
from .interfaces.http.errors import add_error_handlers
from .interfaces.http.routers import courses as courses_router
from .interfaces.http.routers import students as students_router
from .interfaces.http.schemas import HealthResp

VERSION = "0.1.0"

logger = structlog.get_logger()


def create_app(settings: Settings | None = None, database: Database | None = None,
               storage: SupabaseImageStorage | None = None) -> FastAPI:
    """Build the API.

    ``database`` and ``storage`` are created from settings on startup unless
    given; either way they live on ``app.state`` until shutdown disposes them.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting roster service", version=VERSION)
        if app.state.database is None:
            app.state.database = Database.from_settings(settings)
        app.state.database.create_all()
        app.state.database.ping()
        logger.info("Database connection established")

        if app.state.storage is None:
            app.state.storage = SupabaseImageStorage.from_settings(settings)
        if app.state.storage is None:
            logger.warning("Image storage not configured; image uploads will be rejected")

        yield

        if app.state.storage is not None:
            app.state.storage.close()
        app.state.database.dispose()
        logger.info("Roster service stopped")

    app = FastAPI(title="Student Roster Service", version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.storage = storage

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        method = request.method
        path = request.url.path

        response = await call_next(request)

        # label by route template so per-id paths share one series
        route = request.scope.get("route")
        endpoint = getattr(route, "path", path)

        duration = time.time() - start_time
        status_code = response.status_code
        http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

        logger.info(
            "http_request",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration * 1000, 2)
        )
        return response

    @app.get("/health", response_model=HealthResp)
    def health():
        return HealthResp(status="healthy")

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint"""
        return metrics_endpoint()

    add_error_handlers(app)
    app.include_router(students_router.router)
    app.include_router(courses_router.router)
    return app


app = create_app()
