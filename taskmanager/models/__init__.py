"""
Models module for the Task Manager
Contains all database models and their schemas
"""
from sqlmodel import SQLModel
from .user import User, UserCredentials, UserSession
from .profile import Profile, ProfileUpdate, ProfilePublic
from .category import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    CategoryPublic,
    CategorySummary,
    CategoryWithCount,
    DEFAULT_CATEGORIES,
    DEFAULT_COLORS,
)
from .task import Task, TaskCreate, TaskUpdate, TaskCompletion, TaskPublic, Priority, PRIORITY_RANK

__all__ = [
    "SQLModel",
    "User",
    "UserCredentials",
    "UserSession",
    "Profile",
    "ProfileUpdate",
    "ProfilePublic",
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryPublic",
    "CategorySummary",
    "CategoryWithCount",
    "DEFAULT_CATEGORIES",
    "DEFAULT_COLORS",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskCompletion",
    "TaskPublic",
    "Priority",
    "PRIORITY_RANK",
]
