"""
Category model for the Task Manager
Categories group tasks; names are unique per owner
"""
import re
import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING

from pydantic import field_validator
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from ..utils.clock import utcnow

if TYPE_CHECKING:
    from .task import Task

DEFAULT_COLORS = [
    "#3B82F6",  # Blue
    "#EF4444",  # Red
    "#10B981",  # Green
    "#F59E0B",  # Yellow
    "#8B5CF6",  # Purple
    "#EC4899",  # Pink
    "#06B6D4",  # Cyan
    "#84CC16",  # Lime
    "#F97316",  # Orange
    "#6B7280",  # Gray
]

# Seeded for every new profile
DEFAULT_CATEGORIES = [
    ("Personal", "#3B82F6"),
    ("Work", "#EF4444"),
    ("Shopping", "#10B981"),
    ("Health", "#F59E0B"),
]

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _check_color(v: str) -> str:
    if not _HEX_COLOR.match(v):
        raise ValueError("Color must be a hex string like #3B82F6")
    return v.upper()


class CategoryBase(SQLModel):
    """Base model for category with common fields"""
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(default=DEFAULT_COLORS[0], max_length=7)
    description: Optional[str] = Field(default=None, max_length=500)


class Category(CategoryBase, table=True):
    """Category model for database table"""
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("name", "user_id", name="uq_categories_name_user"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})

    tasks: List["Task"] = Relationship(back_populates="category")


class CategoryCreate(CategoryBase):
    """Schema for creating a new category"""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _check_color(v)


class CategoryUpdate(SQLModel):
    """Schema for updating category information"""
    name: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return _check_color(v) if v is not None else v


class CategorySummary(SQLModel):
    """Label data attached to a task"""
    id: uuid.UUID
    name: str
    color: str


class CategoryPublic(CategoryBase):
    """Public representation of category"""
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class CategoryWithCount(CategoryPublic):
    """Category plus the number of tasks that reference it"""
    task_count: int = 0
