from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from okr_app.core import settings, setup_logging, get_logger
from okr_app.exceptions import AppException, app_exception_handler, general_exception_handler
from okr_app.api.v1 import api_router
from okr_app.db import Base, engine, get_db_context
from okr_app.services import CycleService
from okr_app.testing import is_test_mode, configure_test_overrides

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info(f"Starting up {settings.api_title} ({settings.environment})")

    if not is_test_mode():
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

        if settings.refresh_cycles_on_startup:
            with get_db_context() as db:
                changes = CycleService(db).refresh_statuses()
            if changes:
                logger.info(f"Updated {len(changes)} cycle status(es) on startup")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.api_title}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=settings.api_description,
        lifespan=lifespan
    )

    cors_origins = settings.cors_origins
    if settings.environment == "production":
        localhost_origins = [origin for origin in cors_origins if "localhost" in origin or "127.0.0.1" in origin]
        if localhost_origins:
            logger.warning(f"Production environment detected with localhost origins: {localhost_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router)

    # Isolated DB for the test suite
    if is_test_mode():
        configure_test_overrides(app)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {"status": "ok", "message": f"{settings.api_title} is running"}

    @app.get("/healthz")
    async def healthz():
        """Production health check endpoint."""
        return {"status": "ok"}

    return app


# Create the app instance
app = create_app()
