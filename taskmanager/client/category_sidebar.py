"""
Category sidebar for the Task Manager client
Lists categories with task counts and emits the active selection
"""
import asyncio
import logging
import uuid
from collections import Counter
from typing import Awaitable, Callable, Dict, List, Optional, Union

from ..models.category import DEFAULT_COLORS, CategoryCreate, CategoryPublic, CategoryUpdate
from ..models.task import TaskPublic
from ..models.user import UserSession
from ..utils.errors import format_error_message
from .data_source import TaskDataSource
from .notifications import Notifier
from .task_list import guarded

logger = logging.getLogger(__name__)

# Selection value for the "all tasks" pseudo-category
ALL_CATEGORIES = None

SelectionCallback = Callable[[Optional[uuid.UUID]], Union[None, Awaitable[None]]]


class CategorySidebar:
    """State holder for the category list and its selection"""

    def __init__(
        self,
        data_source: TaskDataSource,
        session: UserSession,
        notifier: Notifier,
        on_select: Optional[SelectionCallback] = None,
    ):
        self.data_source = data_source
        self.session = session
        self.notifier = notifier
        self.on_select = on_select

        self.categories: List[CategoryPublic] = []
        self.tasks: List[TaskPublic] = []
        self.selected_id: Optional[uuid.UUID] = ALL_CATEGORIES
        self.is_loading = False

    @property
    def counts(self) -> Dict[uuid.UUID, int]:
        """Tasks per category, zero for categories without tasks."""
        tally = Counter(task.category_id for task in self.tasks if task.category_id is not None)
        return {category.id: tally.get(category.id, 0) for category in self.categories}

    @property
    def total(self) -> int:
        return len(self.tasks)

    async def load(self) -> None:
        """Fetch categories and all tasks concurrently; each may fail on its own."""
        self.is_loading = True
        categories_result, tasks_result = await asyncio.gather(
            guarded(lambda: self.data_source.list_categories(self.session), "Loading categories"),
            guarded(lambda: self.data_source.list_tasks(self.session), "Loading tasks"),
        )

        categories, error = categories_result
        if error:
            self.notifier.error("Failed to load categories", format_error_message(error))
        else:
            self.categories = list(categories or [])

        tasks, error = tasks_result
        if error:
            logger.info("Task counts unavailable: %s", error.message)
        else:
            self.tasks = list(tasks or [])
        self.is_loading = False

    async def select(self, category_id: Optional[uuid.UUID]) -> None:
        self.selected_id = category_id
        if self.on_select is not None:
            outcome = self.on_select(category_id)
            if asyncio.iscoroutine(outcome):
                await outcome

    @staticmethod
    def _check_name(name: Optional[str]) -> Optional[str]:
        if not name or not name.strip():
            return "Category name is required"
        return None

    async def save_category(
        self,
        name: str,
        color: str = DEFAULT_COLORS[0],
        description: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
    ) -> Optional[CategoryPublic]:
        """Create a category, or edit one when ``category_id`` is given."""
        problem = self._check_name(name)
        if problem:
            self.notifier.error(problem)
            return None

        description = (description or "").strip() or None
        if category_id is None:
            call = lambda: self.data_source.create_category(  # noqa: E731
                self.session, CategoryCreate(name=name, color=color, description=description)
            )
        else:
            call = lambda: self.data_source.update_category(  # noqa: E731
                self.session, category_id, CategoryUpdate(name=name, color=color, description=description)
            )

        saved, error = await guarded(call, "Saving category")
        if error:
            self.notifier.error("Failed to save category", format_error_message(error))
            return None

        if category_id is None:
            self.categories = self.categories + [saved]
        else:
            self.categories = [saved if c.id == saved.id else c for c in self.categories]
        self.notifier.success("Category saved successfully")
        return saved

    async def delete_category(self, category_id: uuid.UUID) -> bool:
        """
        Delete a category and drop it from the local list.

        Its tasks stay, uncategorised. Deleting the selected category selects
        all tasks.
        """
        _, error = await guarded(
            lambda: self.data_source.delete_category(self.session, category_id), "Deleting category"
        )
        if error:
            self.notifier.error("Failed to delete category", format_error_message(error))
            return False

        self.categories = [c for c in self.categories if c.id != category_id]
        self.tasks = [
            task.model_copy(update={"category_id": None, "category": None})
            if task.category_id == category_id else task
            for task in self.tasks
        ]
        self.notifier.success("Category deleted successfully")
        if self.selected_id == category_id:
            await self.select(ALL_CATEGORIES)
        return True

    def handle_task_saved(self, saved: TaskPublic, created: bool) -> None:
        """Keep counts current after a task is created or edited elsewhere."""
        if created:
            self.tasks = [saved] + self.tasks
        else:
            self.tasks = [saved if task.id == saved.id else task for task in self.tasks]

    def handle_task_deleted(self, task_id: uuid.UUID) -> None:
        self.tasks = [task for task in self.tasks if task.id != task_id]
