"""Task schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from task_manager.models.enums import TaskPriority, TaskStatus

# JSON uses camelCase (dueDate, reminderDate); snake_case is accepted on input
camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(BaseModel):
    """Create a new task."""

    model_config = ConfigDict(**camel_config, str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=5000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime


class TaskUpdate(BaseModel):
    """Update a task. Omitted fields stay as they are; explicit nulls are rejected."""

    model_config = ConfigDict(**camel_config, str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1, max_length=5000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    reminder_date: datetime | None = None

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "TaskUpdate":
        """Refuse fields that were sent as null."""
        nulls = sorted(
            type(self).model_fields[name].alias or name
            for name in self.model_fields_set
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        """Return only the fields the caller sent."""
        return self.model_dump(exclude_unset=True)


class ReminderCreate(BaseModel):
    """Set a reminder on a task."""

    model_config = camel_config

    reminder_date: datetime


class TaskResponse(BaseModel):
    """Task response."""

    model_config = ConfigDict(**camel_config, from_attributes=True)

    id: int
    owner_id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime
    reminder_date: datetime | None
    created_at: datetime
    updated_at: datetime


class ReminderResponse(BaseModel):
    """Response after setting a reminder."""

    message: str = "Reminder set successfully"
    task: TaskResponse


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
