"""Unit tests for database models."""
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from tasktrack.models import Task, TaskPriority, TaskStatus, User


def test_user_model(db_session: Session):
    """Test User model creation."""
    user = User(
        first_name="Alice",
        last_name="Smith",
        email="alice@x.com",
        hashed_password="hashed_password",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)

    assert isinstance(user.id, str)
    assert len(user.id) == 36
    assert user.inserted_at is not None
    assert user.updated_at is not None


def test_task_model_defaults(db_session: Session):
    """Test Task model creation and defaults."""
    user = User(
        first_name="Alice", last_name="Smith", email="alice@x.com", hashed_password="x"
    )
    db_session.add(user)
    db_session.commit()

    task = Task(
        title="Test Task",
        description="Test Description",
        due_date=datetime(2030, 1, 1, tzinfo=UTC),
        creator_id=user.id,
        assignee_id=user.id,
    )
    db_session.add(task)
    db_session.commit()
    db_session.refresh(task)

    assert task.id is not None
    assert task.status == TaskStatus.PENDING.value
    assert task.priority == TaskPriority.MEDIUM.value
    assert task.creator.id == user.id
    assert task.assignee.id == user.id
    assert user.created_tasks == [task]
    assert user.assigned_tasks == [task]
