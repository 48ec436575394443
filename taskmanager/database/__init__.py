"""
Database module for the Task Manager
Engine construction, schema creation and session management
"""
from .database import engine, create_db_and_tables, get_session, build_engine

__all__ = [
    "engine",
    "create_db_and_tables",
    "get_session",
    "build_engine",
]
