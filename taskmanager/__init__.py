"""
Task Manager
Owner-scoped tasks and categories with a REST surface and client-side controllers
"""
__version__ = "1.0.0"
