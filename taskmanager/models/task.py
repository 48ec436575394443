"""
Task model for the Task Manager
Defines the task entity, its priority levels and the create/update/public schemas
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, TYPE_CHECKING

from pydantic import field_validator
from sqlmodel import Field, Relationship, SQLModel

from ..utils.clock import to_naive_utc, utcnow
from .category import CategorySummary

if TYPE_CHECKING:
    from .category import Category

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


class Priority(str, Enum):
    """Task priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


PRIORITY_RANK: Dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class TaskBase(SQLModel):
    """Base model for task with common fields"""
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    completed: bool = Field(default=False)
    due_date: Optional[datetime] = Field(default=None, index=True)
    reminder_date: Optional[datetime] = Field(default=None)
    priority: Optional[Priority] = Field(default=Priority.MEDIUM)
    category_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="categories.id", ondelete="SET NULL", index=True
    )

    @field_validator("due_date", "reminder_date")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class Task(TaskBase, table=True):
    """Task model for database table"""
    __tablename__ = "tasks"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})
    # Set exactly while completed is true
    completed_at: Optional[datetime] = Field(default=None)

    category: Optional["Category"] = Relationship(back_populates="tasks")


class TaskCreate(TaskBase):
    """Schema for creating a new task"""

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v


class TaskUpdate(SQLModel):
    """Schema for updating task information; explicit nulls clear a field"""
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    category_id: Optional[uuid.UUID] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("due_date", "reminder_date")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class TaskCompletion(SQLModel):
    """Request body for toggling completion"""
    completed: bool


class TaskPublic(TaskBase):
    """Public representation of task with its category label"""
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    category: Optional[CategorySummary] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskPublic":
        data = task.model_dump()
        if task.category is not None:
            data["category"] = CategorySummary.model_validate(task.category.model_dump())
        return cls.model_validate(data)
