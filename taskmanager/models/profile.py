"""
Profile model for the Task Manager
One profile per user, sharing the user's identifier
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from ..utils.clock import utcnow


class Profile(SQLModel, table=True):
    """Profile model for database table"""
    __tablename__ = "profiles"

    id: uuid.UUID = Field(primary_key=True, foreign_key="users.id", ondelete="CASCADE")
    email: str = Field(max_length=255, unique=True, nullable=False)
    full_name: Optional[str] = Field(default=None, max_length=200)
    avatar_url: Optional[str] = Field(default=None, max_length=2048)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})


class ProfileUpdate(SQLModel):
    """Schema for updating a profile; email is not editable here"""
    full_name: Optional[str] = Field(default=None, max_length=200)
    avatar_url: Optional[str] = Field(default=None, max_length=2048)


class ProfilePublic(SQLModel):
    """Public representation of profile"""
    id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
