"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from tasktrack import __version__
from tasktrack.api.errors import register_exception_handlers
from tasktrack.api.routes import auth, tasks
from tasktrack.config import get_settings
from tasktrack.core.logging import setup_logging
from tasktrack.core.security import configure_password_hashing
from tasktrack.database import create_tables, init_db
from tasktrack.telemetry import TelemetryManager

# Get settings
settings = get_settings()

# Configure logging
setup_logging(settings)
logger = logging.getLogger(__name__)

configure_password_hashing(settings)

# Initialize telemetry
telemetry_manager = TelemetryManager(settings)
telemetry_manager.setup()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting {settings.app_name} application")

    # Initialize database
    init_db(settings)
    if settings.db_create_tables:
        create_tables()
    logger.info("Database initialized")

    yield

    # Shutdown telemetry
    telemetry_manager.shutdown()
    logger.info(f"Shutting down {settings.app_name} application")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Multi-user task tracking with creator/assignee access control",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Instrument FastAPI with OpenTelemetry
if settings.otel_enabled:
    FastAPIInstrumentor.instrument_app(app)
    logger.info("FastAPI instrumented with OpenTelemetry")

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(tasks.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"{settings.app_name} API", "version": __version__, "docs": "/docs"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tasktrack.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
