"""Task model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from task_manager.database import Base
from task_manager.models.enums import TaskPriority, TaskStatus
from task_manager.models.mixins import TimestampMixin


class Task(Base, TimestampMixin):
    """Personal task owned by exactly one user."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value, index=True)
    priority = Column(String(20), nullable=False, default=TaskPriority.MEDIUM.value, index=True)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    reminder_date = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    owner = relationship("User", back_populates="tasks")
