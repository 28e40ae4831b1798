# ==== PROCUREMENT API MAIN APPLICATION MODULE ==== #

"""
Main FastAPI application for the procurement API.

This module wires the routers, middleware, observability and error
handlers for the category, client, vendor, memo, purchase order and
invoice endpoints.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from procurement import __version__
from procurement.exceptions import ProcurementError
from procurement.middleware.correlation import CorrelationMiddleware
from procurement.observability.logging import get_logger, init_logging
from procurement.observability.metrics import init_metrics, metrics_router
from procurement.observability.tracing import init_tracing, instrument_engine
from procurement.routes import (
    attachments, dashboard, exports, invoices, master_data, memos, purchase_orders, vendors
)
from procurement.settings import settings
from procurement.storage.db import close_database, get_session, init_database


logger = get_logger(__name__)


# ==== APPLICATION LIFECYCLE MANAGEMENT ==== #


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown operations.

    Args:
        app (FastAPI): FastAPI application instance

    Yields:
        None: Control back to FastAPI during application runtime
    """
    # --► STARTUP SEQUENCE
    init_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    tracing_enabled = init_tracing(settings.SERVICE_NAME)
    engine = init_database()
    if tracing_enabled:
        instrument_engine(engine)

    logger.info(
        "Procurement API started",
        environment=settings.APP_ENV,
        tracing=tracing_enabled
    )

    yield

    # --► SHUTDOWN SEQUENCE
    await close_database()


# ==== APPLICATION FACTORY ==== #


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Fully configured FastAPI application instance
    """
    app = FastAPI(
        title="Procurement API",
        description="Categories, clients, vendors, memos, purchase orders and invoices",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url="/redoc" if settings.APP_ENV == "dev" else None
    )

    init_metrics(__version__)

    # --► MIDDLEWARE STACK CONFIGURATION
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id", "Content-Disposition"],
    )
    app.add_middleware(CorrelationMiddleware)

    # Stored attachments are served as static files
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads"
    )

    _register_health_endpoints(app)
    _register_info_endpoint(app)
    _register_routers(app)
    _register_exception_handlers(app)

    FastAPIInstrumentor.instrument_app(app)

    return app


# ==== ENDPOINT REGISTRATION HELPERS ==== #


def _register_health_endpoints(app: FastAPI) -> None:
    """
    Register the root banner and liveness/readiness probes.

    Args:
        app (FastAPI): FastAPI application instance
    """
    @app.get("/", tags=["health"], response_class=PlainTextResponse)
    async def root() -> str:
        return "Procurement API berjalan!"

    @app.get("/healthz", tags=["health"])
    async def health_check() -> dict:
        """Liveness probe endpoint for container orchestration."""
        return {
            "status": "ok",
            "service": settings.SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.get("/readyz", tags=["health"])
    async def readiness_check() -> dict:
        """Readiness probe endpoint for container orchestration."""
        return {
            "status": "ready",
            "service": settings.SERVICE_NAME,
            "environment": settings.APP_ENV
        }


def _register_info_endpoint(app: FastAPI) -> None:
    """
    Register application information endpoint with a database check.

    Args:
        app (FastAPI): FastAPI application instance
    """
    @app.get("/info", tags=["info"])
    async def app_info() -> dict:
        """
        Application metadata and database reachability.

        Returns:
            dict: Service name, version, environment and database status
        """
        try:
            async with get_session() as db:
                await db.execute(text("SELECT 1"))
            database_status = "connected"
        except Exception as exc:
            logger.warning("Database check failed", error=str(exc))
            database_status = "disconnected"

        return {
            "service": settings.SERVICE_NAME,
            "version": __version__,
            "environment": settings.APP_ENV,
            "database_status": database_status,
            "required_vendor_documents": sorted(settings.required_vendor_documents),
        }


def _register_routers(app: FastAPI) -> None:
    """
    Register all application routers with appropriate prefixes and tags.

    The export router goes first so ``/api/po/export`` is not captured by
    the purchase order path parameter.

    Args:
        app (FastAPI): FastAPI application instance
    """
    app.include_router(metrics_router, prefix="", tags=["monitoring"])
    app.include_router(exports.router, prefix="/api", tags=["export"])
    app.include_router(master_data.kategori_router, prefix="/api/kategori", tags=["kategori"])
    app.include_router(master_data.client_router, prefix="/api/client", tags=["client"])
    app.include_router(vendors.router, prefix="/api/vendor", tags=["vendor"])
    app.include_router(memos.router, prefix="/api/memo", tags=["memo"])
    app.include_router(purchase_orders.router, prefix="/api/po", tags=["po"])
    app.include_router(invoices.router, prefix="/api/invoice", tags=["invoice"])
    app.include_router(attachments.router, prefix="/api/attachments", tags=["attachments"])
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])


# ==== EXCEPTION HANDLERS ==== #


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "unknown")


def _register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers.

    Args:
        app (FastAPI): FastAPI application instance
    """
    @app.exception_handler(ProcurementError)
    async def procurement_error_handler(
        request: Request,
        exc: ProcurementError
    ) -> JSONResponse:
        """Render service errors with their own status and code."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message,
                "code": exc.code,
                "correlation_id": _correlation_id(request)
            }
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(
        request: Request,
        exc: IntegrityError
    ) -> JSONResponse:
        """Duplicate keys and dangling references become 409 Conflict."""
        logger.warning(
            "Integrity error",
            path=request.url.path,
            error=str(exc.orig)
        )
        return JSONResponse(
            status_code=409,
            content={
                "detail": "Data bentrok dengan data yang sudah ada atau referensi tidak valid",
                "code": "CONFLICT",
                "correlation_id": _correlation_id(request)
            }
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        """Keep FastAPI's ``detail`` body and add the correlation id."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "correlation_id": _correlation_id(request)
            },
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Args:
            request (Request): HTTP request that caused the exception
            exc (Exception): Exception that occurred

        Returns:
            JSONResponse: Standardized error response
        """
        correlation_id = _correlation_id(request)
        logger.exception(
            "Unhandled error",
            path=request.url.path,
            correlation_id=correlation_id
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
                "correlation_id": correlation_id,
                "code": "INTERNAL_ERROR"
            }
        )


# ==== APPLICATION INSTANCE ==== #


app = create_app()
