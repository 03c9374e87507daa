"""Task Pydantic schemas."""
from datetime import datetime

from pydantic import BaseModel, Field

from tasktrack.models.task import TaskPriority, TaskStatus


class TaskBase(BaseModel):
    """Base task schema."""

    title: str = Field(..., min_length=1, max_length=200, description="Task title")
    description: str = Field(..., min_length=1, max_length=10000, description="Task description")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Task status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    due_date: datetime = Field(..., description="Due date")


class TaskCreate(TaskBase):
    """Schema for creating a task."""

    assignee_id: str | None = Field(
        None, description="Assigned user ID (defaults to the creator)"
    )


class TaskUpdate(BaseModel):
    """Schema for updating a task. There is no way to change the creator."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=10000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    assignee_id: str | None = None


class TaskResponse(TaskBase):
    """Schema for task response."""

    id: int
    creator_id: str
    assignee_id: str
    inserted_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskListResponse(BaseModel):
    """Schema for task list response."""

    data: list[TaskResponse]
