"""SQLAlchemy models."""

from task_manager.models.task import Task
from task_manager.models.user import User

__all__ = [
    "User",
    "Task",
]
