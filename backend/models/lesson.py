"""Lesson, task and answer option model definitions."""

import enum
import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from backend.database import Base, utcnow


class LessonStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class TaskType(str, enum.Enum):
    PICK_ONE = "PICK_ONE"
    FILL_IN_BLANK = "FILL_IN_BLANK"
    MATCH = "MATCH"


def _new_id() -> str:
    return str(uuid.uuid4())


class Lesson(Base):
    """A lesson authored by a user, made of ordered tasks."""
    __tablename__ = "lessons"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String, nullable=False)
    description = Column(Text)
    status = Column(String, nullable=False, default=LessonStatus.DRAFT.value, index=True)
    published_at = Column(DateTime(timezone=True))
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    tasks = relationship(
        "Task",
        back_populates="lesson",
        order_by="Task.order",
        cascade="all, delete-orphan",
    )


class Task(Base):
    """A single exercise inside a lesson."""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=_new_id)
    lesson_id = Column(String(36), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    type = Column(String, nullable=False)
    order = Column(Integer, nullable=False, default=0)
    config = Column(JSON, nullable=False, default=dict)

    lesson = relationship("Lesson", back_populates="tasks")
    options = relationship("TaskOption", back_populates="task", cascade="all, delete-orphan")


class TaskOption(Base):
    """An answer option for a task."""
    __tablename__ = "task_options"

    id = Column(String(36), primary_key=True, default=_new_id)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    task = relationship("Task", back_populates="options")
