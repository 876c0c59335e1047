"""Task API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from task_manager.api.dependencies import get_current_user, get_task_service
from task_manager.models.enums import SortOrder, TaskPriority, TaskStatus
from task_manager.models.user import User
from task_manager.schemas.task import (
    MessageResponse,
    ReminderCreate,
    ReminderResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from task_manager.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Create a new task."""
    return service.create_task(
        current_user.id,
        title=task_data.title,
        description=task_data.description,
        due_date=task_data.due_date,
        status=task_data.status,
        priority=task_data.priority,
    )


@router.get("", response_model=list[TaskResponse])
def get_tasks(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
    task_status: TaskStatus | None = Query(default=None, alias="status"),
    priority: TaskPriority | None = Query(default=None),
    sort: SortOrder = Query(default=SortOrder.ASC, description="Order by due date"),
):
    """Get the current user's tasks, optionally filtered by status and priority."""
    return service.list_tasks(current_user.id, status=task_status, priority=priority, sort=sort)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Get a single task."""
    return service.get_task(current_user.id, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Update the fields supplied in the body."""
    return service.update_task(current_user.id, task_id, task_data.changes())


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Delete a task."""
    service.delete_task(current_user.id, task_id)
    return MessageResponse(message="Task deleted successfully")


@router.post("/{task_id}/reminder", response_model=ReminderResponse)
def set_reminder(
    task_id: int,
    reminder: ReminderCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Set a reminder date on a task."""
    task = service.set_reminder(current_user.id, task_id, reminder.reminder_date)
    return ReminderResponse(task=TaskResponse.model_validate(task))
