"""Test fixtures and configuration."""
import os
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta

TEST_SECRET_KEY = "test-secret-key-minimum-32-characters-long"

# Module-level settings in tasktrack.main are read on import
os.environ.update(
    {
        "DATABASE_URL": "sqlite://",
        "SECRET_KEY": TEST_SECRET_KEY,
        "ENVIRONMENT": "test",
        "OTEL_ENABLED": "false",
        "BCRYPT_ROUNDS": "4",
    }
)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tasktrack.config import Settings, get_settings  # noqa: E402
from tasktrack.core.auth import create_user  # noqa: E402
from tasktrack.core.scope import Scope  # noqa: E402
from tasktrack.core.security import configure_password_hashing  # noqa: E402
from tasktrack.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from tasktrack.main import app  # noqa: E402
from tasktrack.models import Task, User  # noqa: E402


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Get test settings."""
    return Settings(
        database_url="sqlite:///:memory:",
        secret_key=TEST_SECRET_KEY,
        environment="test",
        otel_enabled=False,
        bcrypt_rounds=4,
        access_token_ttl="1h",
    )


@pytest.fixture(scope="session", autouse=True)
def fast_password_hashing(test_settings):
    """Use the minimum bcrypt cost in tests."""
    configure_password_hashing(test_settings)


@pytest.fixture(scope="function")
def db_engine(test_settings):
    """Create a test database engine."""
    engine = create_engine(
        test_settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session, test_settings) -> Generator[TestClient, None, None]:
    """Create a test client."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    def override_get_settings():
        return test_settings

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = override_get_settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session) -> Callable[..., User]:
    """Factory that stores a user directly through the identity core."""

    def _make_user(email: str, password: str = "secret1", first_name: str = "Test") -> User:
        return create_user(db_session, first_name, "User", email, password)

    return _make_user


@pytest.fixture
def make_task(db_session) -> Callable[..., Task]:
    """Factory that stores a task with explicit creator and assignee."""

    def _make_task(creator: User, assignee: User | None = None, title: str = "Task") -> Task:
        task = Task(
            creator_id=creator.id,
            assignee_id=(assignee or creator).id,
            title=title,
            description="Description",
            due_date=datetime.now(UTC) + timedelta(days=1),
        )
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task

    return _make_task


@pytest.fixture
def scope_for() -> Callable[[User], Scope]:
    """Build an authorization scope for a user."""
    return lambda user: Scope(user=user)


@pytest.fixture
def test_user_data():
    """Sample user data for testing."""
    return {
        "first_name": "Alice",
        "last_name": "Smith",
        "email": "alice@x.com",
        "password": "secret1",
    }


@pytest.fixture
def test_task_data():
    """Sample task data for testing."""
    return {
        "title": "Test Task",
        "description": "This is a test task",
        "priority": "high",
        "status": "pending",
        "due_date": "2030-01-01T12:00:00Z",
    }
