"""Task service for CRUD operations and business logic."""
import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tasktrack.core.errors import AssigneeNotFound
from tasktrack.core.scope import (
    Scope,
    authorize_modify,
    authorize_read,
    authorize_reassignment,
    get_tasks_for_scope,
    resolve_assignee,
)
from tasktrack.models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

# Fields a creator may change. creator_id and id are deliberately absent.
UPDATABLE_FIELDS = frozenset(
    {"title", "description", "status", "priority", "due_date", "assignee_id"}
)


def find_task_by_id(db: Session, task_id: int) -> Task | None:
    """Get a task by ID without any access check."""
    stmt = select(Task).where(Task.id == task_id)
    return db.execute(stmt).scalar_one_or_none()


def _commit_assignment(db: Session, assignee_id: str) -> None:
    """Commit, reporting a foreign-key violation as a missing assignee."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Assignee {assignee_id} disappeared before commit")
        raise AssigneeNotFound(assignee_id) from e


def create_task(
    db: Session,
    scope: Scope,
    title: str,
    description: str,
    due_date: datetime,
    task_status: TaskStatus | str = TaskStatus.PENDING,
    priority: TaskPriority | str = TaskPriority.MEDIUM,
    assignee_id: str | None = None,
) -> Task:
    """
    Create a new task.

    Args:
        db: Database session
        scope: Authorization scope
        title: Task title
        description: Task description
        due_date: Due date
        task_status: Task status
        priority: Task priority
        assignee_id: Assigned user ID, defaults to the creator

    Returns:
        Created task

    Raises:
        AssigneeNotFound: If the assignee does not exist
    """
    assignee_id = resolve_assignee(db, scope, assignee_id)

    task = Task(
        creator_id=scope.user_id,
        assignee_id=assignee_id,
        title=title,
        description=description,
        status=TaskStatus(task_status).value,
        priority=TaskPriority(priority).value,
        due_date=due_date,
    )
    db.add(task)
    _commit_assignment(db, assignee_id)
    db.refresh(task)

    logger.info(f"User {scope.user_id} created task {task.id} assigned to {assignee_id}")
    return task


def get_task_by_id(db: Session, scope: Scope, task_id: int) -> Task:
    """
    Get a task by ID if the user may read it.

    Raises:
        NotVisible: If the task is missing or unrelated to the user
    """
    return authorize_read(scope, find_task_by_id(db, task_id))


def list_tasks(
    db: Session,
    scope: Scope,
    status_filter: str | None = None,
    priority_filter: str | None = None,
) -> list[Task]:
    """
    List all tasks visible to the user.

    Args:
        db: Database session
        scope: Authorization scope
        status_filter: Optional status filter
        priority_filter: Optional priority filter

    Returns:
        List of tasks
    """
    return get_tasks_for_scope(db, scope, status_filter, priority_filter)


def update_task(
    db: Session,
    scope: Scope,
    task_id: int,
    updates: dict[str, Any],
) -> Task:
    """
    Update a task.

    Only fields present in ``updates`` are written. The creator can never
    be changed.

    Args:
        db: Database session
        scope: Authorization scope
        task_id: Task ID
        updates: Dictionary of fields to update

    Returns:
        Updated task

    Raises:
        NotVisible: If the task is missing or unrelated to the user
        NotPermitted: If the user is not the task creator
        AssigneeNotFound: If reassigning to a user that does not exist
    """
    task = authorize_modify(scope, find_task_by_id(db, task_id))

    changes = {
        field: value
        for field, value in updates.items()
        if field in UPDATABLE_FIELDS and value is not None
    }
    if not changes:
        return task

    if "assignee_id" in changes:
        authorize_reassignment(db, scope, task, changes["assignee_id"])

    for field, value in changes.items():
        # Handle enum values
        if hasattr(value, "value"):
            value = value.value
        setattr(task, field, value)

    task.updated_at = datetime.now(UTC)
    _commit_assignment(db, task.assignee_id)
    db.refresh(task)

    logger.info(f"User {scope.user_id} updated task {task.id}: {sorted(changes)}")
    return task


def delete_task(db: Session, scope: Scope, task_id: int) -> None:
    """
    Delete a task.

    Raises:
        NotVisible: If the task is missing or unrelated to the user
        NotPermitted: If the user is not the task creator
    """
    task = authorize_modify(scope, find_task_by_id(db, task_id))

    db.delete(task)
    db.commit()
    logger.info(f"User {scope.user_id} deleted task {task_id}")
