"""Database setup and session management."""

import logging
from collections.abc import Generator
from typing import Any

from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from tasktrack.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite leaves foreign keys unenforced unless asked on each connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Global engine and session factory
engine: Any = None
SessionLocal: Any = None


def init_db(settings: Settings | None = None) -> None:
    """Initialize database engine and session factory."""
    global engine, SessionLocal

    if settings is None:
        settings = get_settings()

    engine_options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.db_echo}
    if settings.is_sqlite:
        engine_options["connect_args"] = {"check_same_thread": False}
    else:
        engine_options["pool_size"] = settings.db_pool_size
        engine_options["max_overflow"] = settings.db_max_overflow

    # Create engine
    engine = create_engine(str(settings.database_url), **engine_options)
    if settings.is_sqlite:
        event.listen(engine, "connect", enable_sqlite_foreign_keys)

    # Instrument SQLAlchemy with OpenTelemetry
    if settings.otel_enabled:
        SQLAlchemyInstrumentor().instrument(
            engine=engine,
            service=settings.otel_service_name,
        )

    # Create session factory
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session]:
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all tables in the database."""
    # Import models so they are registered on the metadata
    import tasktrack.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
