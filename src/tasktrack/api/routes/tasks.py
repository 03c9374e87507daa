"""Task routes."""
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from tasktrack.api.deps import CurrentScope, DatabaseSession
from tasktrack.models import TaskPriority, TaskStatus
from tasktrack.schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from tasktrack.services.task_service import (
    create_task,
    delete_task,
    get_task_by_id,
    list_tasks,
    update_task,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
def list_all_tasks(
    scope: CurrentScope,
    db: DatabaseSession,
    status: Annotated[TaskStatus | None, Query(description="Filter by status")] = None,
    priority: Annotated[TaskPriority | None, Query(description="Filter by priority")] = None,
):
    """
    List tasks the current user created or is assigned to.

    Args:
        scope: Current user scope
        db: Database session
        status: Optional status filter
        priority: Optional priority filter

    Returns:
        List of tasks
    """
    tasks = list_tasks(
        db,
        scope,
        status.value if status else None,
        priority.value if priority else None,
    )
    return TaskListResponse(data=tasks)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_new_task(
    task_data: TaskCreate,
    scope: CurrentScope,
    db: DatabaseSession,
):
    """
    Create a new task. Without ``assignee_id`` the task is assigned to its creator.

    Args:
        task_data: Task creation data
        scope: Current user scope
        db: Database session

    Returns:
        Created task
    """
    return create_task(
        db,
        scope,
        title=task_data.title,
        description=task_data.description,
        due_date=task_data.due_date,
        task_status=task_data.status,
        priority=task_data.priority,
        assignee_id=task_data.assignee_id,
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    scope: CurrentScope,
    db: DatabaseSession,
):
    """
    Get a specific task.

    Tasks the user neither created nor is assigned to are reported as not found.
    """
    return get_task_by_id(db, scope, task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
@router.put("/{task_id}", response_model=TaskResponse)
def update_existing_task(
    task_id: int,
    task_data: TaskUpdate,
    scope: CurrentScope,
    db: DatabaseSession,
):
    """
    Update a task. Only the creator may update it.

    Args:
        task_id: Task ID
        task_data: Task update data
        scope: Current user scope
        db: Database session

    Returns:
        Updated task
    """
    # Convert Pydantic model to dict, excluding None values
    updates = task_data.model_dump(exclude_none=True)
    return update_task(db, scope, task_id, updates)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_existing_task(
    task_id: int,
    scope: CurrentScope,
    db: DatabaseSession,
):
    """
    Delete a task. Only the creator may delete it.

    Args:
        task_id: Task ID
        scope: Current user scope
        db: Database session
    """
    delete_task(db, scope, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
