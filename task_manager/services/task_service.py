"""Task service: every query is scoped to the owning user."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Query, Session

from task_manager.exceptions import NotFound, ValidationFailed
from task_manager.models.enums import SortOrder, TaskPriority, TaskStatus
from task_manager.models.task import Task

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "status", "priority", "due_date", "reminder_date")

# Largest id the integer primary key can hold
MAX_TASK_ID = 2**31 - 1


def _coerce_status(value: Any) -> str:
    try:
        return TaskStatus(value).value
    except ValueError:
        raise ValidationFailed(f"Invalid status: {value}") from None


def _coerce_priority(value: Any) -> str:
    try:
        return TaskPriority(value).value
    except ValueError:
        raise ValidationFailed(f"Invalid priority: {value}") from None


def _require_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailed(f"{field} must be a non-empty string")
    return value.strip()


def _require_datetime(field: str, value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationFailed(f"{field} must be a date")
    # Stored as UTC; naive values are taken to be UTC already
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class TaskService:
    """Create, read, update and delete tasks on behalf of one owner at a time.

    A task that exists but belongs to another user is reported exactly like
    a missing one, so callers cannot discover other users' task ids.
    """

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, owner_id: int) -> Query:
        return self.db.query(Task).filter(Task.owner_id == owner_id)

    def create_task(
        self,
        owner_id: int,
        title: str | None,
        description: str | None,
        due_date: datetime | None,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
    ) -> Task:
        """Create a task owned by ``owner_id``, applying default status and priority."""
        if not title or not description or due_date is None:
            raise ValidationFailed("Missing required fields")

        task = Task(
            owner_id=owner_id,
            title=_require_text("title", title),
            description=_require_text("description", description),
            due_date=_require_datetime("dueDate", due_date),
            status=_coerce_status(status) if status is not None else TaskStatus.PENDING.value,
            priority=(
                _coerce_priority(priority) if priority is not None else TaskPriority.MEDIUM.value
            ),
        )
        self.db.add(task)
        self._commit()
        self.db.refresh(task)
        logger.info(f"User {owner_id} created task {task.id}")
        return task

    def list_tasks(
        self,
        owner_id: int,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
        sort: SortOrder | str = SortOrder.ASC,
    ) -> list[Task]:
        """List the owner's tasks, optionally filtered, ordered by due date."""
        query = self._owned(owner_id)

        if status is not None:
            query = query.filter(Task.status == _coerce_status(status))
        if priority is not None:
            query = query.filter(Task.priority == _coerce_priority(priority))

        try:
            direction = SortOrder(sort)
        except ValueError:
            raise ValidationFailed(f"Invalid sort order: {sort}") from None

        if direction == SortOrder.DESC:
            query = query.order_by(Task.due_date.desc(), Task.id.desc())
        else:
            query = query.order_by(Task.due_date.asc(), Task.id.asc())

        return query.all()

    def get_task(self, owner_id: int, task_id: int) -> Task:
        """Get one of the owner's tasks."""
        if not 1 <= task_id <= MAX_TASK_ID:
            raise NotFound()
        task = self._owned(owner_id).filter(Task.id == task_id).first()
        if not task:
            raise NotFound()
        return task

    def update_task(self, owner_id: int, task_id: int, changes: dict[str, Any]) -> Task:
        """Apply a partial update.

        Keys absent from ``changes`` are left alone. A key present with a
        ``None`` value is rejected rather than clearing the field.
        """
        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationFailed(f"Unknown fields: {', '.join(unknown)}")

        nulls = sorted(name for name, value in changes.items() if value is None)
        if nulls:
            raise ValidationFailed(f"Fields cannot be null: {', '.join(nulls)}")

        values: dict[str, Any] = {}
        for name, value in changes.items():
            if name in ("title", "description"):
                values[name] = _require_text(name, value)
            elif name == "status":
                values[name] = _coerce_status(value)
            elif name == "priority":
                values[name] = _coerce_priority(value)
            else:
                values[name] = _require_datetime(name, value)

        task = self.get_task(owner_id, task_id)
        for name, value in values.items():
            setattr(task, name, value)

        self._commit()
        self.db.refresh(task)
        logger.info(f"User {owner_id} updated task {task_id}: {sorted(values)}")
        return task

    def delete_task(self, owner_id: int, task_id: int) -> None:
        """Delete one of the owner's tasks."""
        task = self.get_task(owner_id, task_id)
        self.db.delete(task)
        self._commit()
        logger.info(f"User {owner_id} deleted task {task_id}")

    def set_reminder(self, owner_id: int, task_id: int, reminder_date: datetime | None) -> Task:
        """Set the reminder date on one of the owner's tasks."""
        if reminder_date is None:
            raise ValidationFailed("Missing reminder date")
        return self.update_task(owner_id, task_id, {"reminder_date": reminder_date})

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
