"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from task_manager.database import Base
from task_manager.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and task ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    # Stored lower-cased; the unique index is what makes registration race-safe
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    tasks = relationship("Task", back_populates="owner", cascade="all, delete-orphan")
