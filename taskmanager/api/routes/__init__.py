"""
API routes for the Task Manager
"""
from . import auth, categories, dashboard, profile, tasks

__all__ = ["auth", "categories", "dashboard", "profile", "tasks"]
