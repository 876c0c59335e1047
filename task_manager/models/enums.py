"""Enums for model fields."""

from enum import Enum


class TaskStatus(str, Enum):
    """Progress of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Priority levels for tasks."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SortOrder(str, Enum):
    """Direction for due date ordering."""

    ASC = "asc"
    DESC = "desc"
