"""
User model for the Task Manager
Authentication identities and the session object handed to every client component
"""
import uuid
from datetime import datetime

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from ..utils.clock import utcnow

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 72  # bcrypt input limit


class User(SQLModel, table=True):
    """User model for database table"""
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True, nullable=False)
    hashed_password: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=utcnow)


class UserCredentials(SQLModel):
    """Request body for sign-up and sign-in"""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("A valid email address is required")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(v.encode("utf-8")) > MAX_PASSWORD_LENGTH:
            raise ValueError(f"Password cannot exceed {MAX_PASSWORD_LENGTH} bytes")
        return v


class UserSession(SQLModel):
    """Authenticated session passed explicitly to whatever needs the current user"""
    user_id: uuid.UUID
    email: str
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
