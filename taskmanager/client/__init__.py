"""
Client-side controllers for the Task Manager
Async state holders for the task list, task form, category sidebar and notifications
"""
from .category_sidebar import ALL_CATEGORIES, CategorySidebar
from .dashboard import Dashboard
from .data_source import ServiceDataSource, TaskDataSource
from .notifications import Notification, NotificationType, Notifier
from .task_form import TaskForm, TaskFormData
from .task_list import TaskListController
from .view import FilterStatus, SortBy, TaskView, derive_view

__all__ = [
    "ALL_CATEGORIES",
    "CategorySidebar",
    "Dashboard",
    "ServiceDataSource",
    "TaskDataSource",
    "Notification",
    "NotificationType",
    "Notifier",
    "TaskForm",
    "TaskFormData",
    "TaskListController",
    "FilterStatus",
    "SortBy",
    "TaskView",
    "derive_view",
]
