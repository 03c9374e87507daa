"""Pydantic schemas for request/response validation."""
from tasktrack.schemas.task import (
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from tasktrack.schemas.user import (
    AuthResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    # Task schemas
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskListResponse",
]
