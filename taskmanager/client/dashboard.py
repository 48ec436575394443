"""
Dashboard wiring for the Task Manager client
Connects the category sidebar, the task list and the task form for one signed-in user
"""
import asyncio
import logging
import uuid
from typing import Optional

from ..models.category import DEFAULT_COLORS, CategoryPublic
from ..models.task import TaskPublic
from ..models.user import UserSession
from .category_sidebar import CategorySidebar
from .data_source import TaskDataSource
from .notifications import Notifier
from .task_form import TaskForm
from .task_list import TaskListController

logger = logging.getLogger(__name__)


class Dashboard:
    """The sidebar's selection drives the task list's scope"""

    def __init__(self, data_source: TaskDataSource, session: UserSession, notifier: Optional[Notifier] = None):
        self.data_source = data_source
        self.session = session
        self.notifier = notifier or Notifier()
        self.task_list = TaskListController(data_source, session, self.notifier)
        self.sidebar = CategorySidebar(data_source, session, self.notifier, on_select=self.task_list.set_scope)
        # Sidebar counts follow every task mutation made through the list
        self.task_list.on_task_saved = self.sidebar.handle_task_saved
        self.task_list.on_task_deleted = self.sidebar.handle_task_deleted

    async def start(self) -> None:
        await asyncio.gather(self.sidebar.load(), self.task_list.load())
        logger.info("Dashboard loaded user=%s tasks=%d", self.session.user_id, len(self.task_list.tasks))

    def open_form(self, task: Optional[TaskPublic] = None) -> TaskForm:
        """A create form, or an edit form for ``task``."""
        return TaskForm(self.data_source, self.session, self.notifier, task=task, on_save=self.task_list.handle_task_saved)

    async def save_category(
        self,
        name: str,
        color: str = DEFAULT_COLORS[0],
        description: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
    ) -> Optional[CategoryPublic]:
        saved = await self.sidebar.save_category(name, color, description, category_id)
        if saved is not None:
            self.task_list.handle_category_saved(saved)
        return saved

    async def delete_category(self, category_id: uuid.UUID) -> bool:
        deleted = await self.sidebar.delete_category(category_id)
        if deleted:
            await self.task_list.handle_category_deleted(category_id)
        return deleted
