"""Pydantic schemas for API requests and responses."""

from task_manager.schemas.auth import (
    LoginResponse,
    RegisterResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from task_manager.schemas.task import (
    MessageResponse,
    ReminderCreate,
    ReminderResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "RegisterResponse",
    "LoginResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "ReminderCreate",
    "ReminderResponse",
    "MessageResponse",
]
