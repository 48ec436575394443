"""
Services module for the Task Manager
Data access layer: owner-scoped operations returning (data, error) results
"""
from .result import ServiceResult
from .task_service import TaskService
from .category_service import CategoryService
from .profile_service import ProfileService
from .auth_service import AuthService

__all__ = [
    "ServiceResult",
    "TaskService",
    "CategoryService",
    "ProfileService",
    "AuthService",
]
