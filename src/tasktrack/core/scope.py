"""Scope-based authorization system.

A task has exactly two related users: its creator, fixed at creation, and
its assignee. Both may read the task; only the creator may change or
delete it. Reads by anyone else fail as "not visible" so the caller can
answer "not found" without confirming that the task exists.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from tasktrack.core.errors import AssigneeNotFound, NotPermitted, NotVisible
from tasktrack.models import Task, User

logger = logging.getLogger(__name__)


@dataclass
class Scope:
    """Authorization scope containing the current user."""

    user: User

    @property
    def user_id(self) -> str:
        return self.user.id


def user_exists(db: Session, user_id: str) -> bool:
    """Check whether a user with the given ID exists."""
    stmt = select(User.id).where(User.id == user_id)
    return db.execute(stmt).scalar_one_or_none() is not None


def can_read_task(scope: Scope, task: Task) -> bool:
    """
    Check if the user in scope can read the given task.

    Args:
        scope: Authorization scope
        task: Task to check access for

    Returns:
        True if the user created or is assigned to the task
    """
    return scope.user_id in (task.creator_id, task.assignee_id)


def can_modify_task(scope: Scope, task: Task) -> bool:
    """
    Check if the user in scope can update or delete the given task.

    Only the task creator can modify it.
    """
    return task.creator_id == scope.user_id


def resolve_assignee(db: Session, scope: Scope, assignee_id: str | None) -> str:
    """
    Decide who a new task is assigned to.

    Any authenticated user may create a task. Without an explicit assignee
    the task goes to its creator; any other assignee must exist.

    Args:
        db: Database session
        scope: Authorization scope
        assignee_id: Requested assignee, if any

    Returns:
        The assignee ID to store

    Raises:
        AssigneeNotFound: If the requested assignee does not exist
    """
    if not assignee_id or assignee_id == scope.user_id:
        return scope.user_id

    if not user_exists(db, assignee_id):
        raise AssigneeNotFound(assignee_id)

    return assignee_id


def authorize_read(scope: Scope, task: Task | None) -> Task:
    """
    Return the task if the user may read it.

    Raises:
        NotVisible: If the task is missing or unrelated to the user
    """
    if task is None or not can_read_task(scope, task):
        raise NotVisible()
    return task


def authorize_modify(scope: Scope, task: Task | None) -> Task:
    """
    Return the task if the user may update or delete it.

    A task the user cannot read is reported as not visible, so write
    attempts cannot be used to probe for task IDs. A visible task the user
    did not create is reported as not permitted.

    Raises:
        NotVisible: If the task is missing or unrelated to the user
        NotPermitted: If the user is the assignee but not the creator
    """
    task = authorize_read(scope, task)
    if not can_modify_task(scope, task):
        logger.info(
            f"User {scope.user_id} denied modification of task {task.id} (not creator)"
        )
        raise NotPermitted()
    return task


def authorize_reassignment(
    db: Session, scope: Scope, task: Task, assignee_id: str
) -> str:
    """
    Check that the task may be reassigned to ``assignee_id``.

    Raises:
        NotPermitted: If the user is not the creator
        AssigneeNotFound: If the new assignee does not exist
    """
    if not can_modify_task(scope, task):
        raise NotPermitted()

    if assignee_id != scope.user_id and not user_exists(db, assignee_id):
        raise AssigneeNotFound(assignee_id)

    return assignee_id


def get_tasks_for_scope(
    db: Session,
    scope: Scope,
    status: str | None = None,
    priority: str | None = None,
) -> list[Task]:
    """
    Get all tasks visible to the current user.

    A user can see a task if they created it or are assigned to it.

    Args:
        db: Database session
        scope: Authorization scope
        status: Optional status filter
        priority: Optional priority filter

    Returns:
        List of tasks visible to the user
    """
    user_id = scope.user_id
    stmt = select(Task).where(
        or_(Task.creator_id == user_id, Task.assignee_id == user_id)
    )

    if status:
        stmt = stmt.where(Task.status == status)
    if priority:
        stmt = stmt.where(Task.priority == priority)

    stmt = stmt.order_by(Task.id)
    return list(db.execute(stmt).scalars().all())
