"""Database models."""
from tasktrack.models.task import Task, TaskPriority, TaskStatus
from tasktrack.models.user import User

__all__ = [
    "User",
    "Task",
    "TaskStatus",
    "TaskPriority",
]
