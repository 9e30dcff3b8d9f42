"""
Kadi - Main Application Entry Point
Multi-tenant invoicing backend
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from kadi.core.config import Settings, get_settings
from kadi.core.errors import KadiError, build_error_response, database_diagnostics
from kadi.core.logging import configure_logging
from kadi.core.middleware import AllowListCORSMiddleware, BodySizeLimitMiddleware, access_log
from kadi.api import ai, auth, clients, invoices, products

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Initializing Kadi backend")
    # Tables are created by Alembic migrations, not auto-generated
    logger.info("Database managed by Alembic migrations")

    yield

    # Shutdown
    logger.info("Shutting down Kadi backend")


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Single exit point turning any failure into {"message": ...}"""
    status_code, message = build_error_response(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_failed",
        method=request.method,
        path=request.url.path,
        status=status_code,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc if status_code >= 500 else False,
        **database_diagnostics(exc),
    )
    return JSONResponse(status_code=status_code, content={"message": message})


def register_error_handlers(app: FastAPI) -> None:
    for exc_class in (KadiError, StarletteHTTPException, RequestValidationError, DBAPIError, Exception):
        app.add_exception_handler(exc_class, handle_error)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; tests pass their own settings"""
    custom_settings = settings is not None
    settings = settings or get_settings()
    configure_logging(settings.DEBUG)

    app = FastAPI(
        title="Kadi API",
        description="Multi-tenant invoicing: clients, catalog, invoices, PDF and AI drafting",
        version="1.0.0",
        lifespan=lifespan,
    )
    if custom_settings:
        app.dependency_overrides[get_settings] = lambda: settings

    # Configure middleware stack (last added runs first)
    app.middleware("http")(access_log)
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.MAX_BODY_BYTES)
    app.add_middleware(AllowListCORSMiddleware, allowed_origins=settings.allowed_origins)

    if settings.allowed_origins:
        logger.info("cors_allow_list", origins=settings.allowed_origins)
    else:
        logger.warning("cors_allow_list_empty", detail="every origin is accepted")

    register_error_handlers(app)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "ok",
            "service": settings.SERVICE_NAME,
            "time": datetime.now(timezone.utc).isoformat(),
        }

    # Include routers
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(clients.router, prefix="/api/clients", tags=["clients"])
    app.include_router(products.router, prefix="/api/products", tags=["products"])
    app.include_router(invoices.router, prefix="/api/invoices", tags=["invoices"])
    app.include_router(ai.router, prefix="/api/ai", tags=["ai"])

    app.mount(
        settings.PUBLIC_UPLOAD_PATH,
        StaticFiles(directory=settings.UPLOAD_FOLDER, check_dir=False),
        name="uploads",
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "kadi.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
