"""
API module for the Task Manager
FastAPI routers, dependencies and middleware
"""
