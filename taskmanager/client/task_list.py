"""
Task list controller for the Task Manager client
Loads the task and category sets, derives the visible list and reconciles it after every mutation
"""
import asyncio
import logging
import uuid
from typing import Awaitable, Callable, List, Optional

from ..models.category import CategoryPublic
from ..models.task import TaskCreate, TaskPublic, TaskUpdate
from ..models.user import UserSession
from ..services.result import ServiceResult
from ..utils.errors import format_error_message, handle_database_error
from ..utils.logging import log_error
from .data_source import TaskDataSource
from .notifications import Notifier
from .view import FilterStatus, SortBy, TaskView, derive_view

logger = logging.getLogger(__name__)


async def guarded(call: Callable[[], Awaitable[ServiceResult]], context: str) -> ServiceResult:
    """
    Await a data source call, turning a raised transport failure into an error result.

    Expected failures already arrive as error results.
    """
    try:
        return await call()
    except Exception as e:
        log_error(e, context)
        return ServiceResult.failure(handle_database_error(e, context))


class TaskListController:
    """
    State holder for the task list.

    Holds the loaded tasks for the current category scope and the full
    category set. The visible list is derived from them on every read of
    ``view``. Mutations go through the data source exactly once and then
    patch the loaded list in place; nothing is re-fetched afterwards.
    """

    def __init__(
        self,
        data_source: TaskDataSource,
        session: UserSession,
        notifier: Notifier,
        category_id: Optional[uuid.UUID] = None,
        on_task_saved: Optional[Callable[[TaskPublic, bool], None]] = None,
        on_task_deleted: Optional[Callable[[uuid.UUID], None]] = None,
    ):
        self.data_source = data_source
        self.session = session
        self.notifier = notifier
        self.category_id = category_id
        # Listeners for other views that track the same tasks
        self.on_task_saved = on_task_saved
        self.on_task_deleted = on_task_deleted

        self.tasks: List[TaskPublic] = []
        self.categories: List[CategoryPublic] = []
        self.search_term = ""
        self.filter_status = FilterStatus.ALL
        self.sort_by = SortBy.CREATED_AT
        self.is_loading = False
        self.loading_error: Optional[str] = None

        self._load_seq = 0

    @property
    def view(self) -> List[TaskView]:
        return derive_view(
            self.tasks,
            self.categories,
            search_term=self.search_term,
            filter_status=self.filter_status,
            sort_by=self.sort_by,
        )

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""

    def set_filter_status(self, status) -> None:
        self.filter_status = FilterStatus(status)

    def set_sort_by(self, sort_by) -> None:
        self.sort_by = SortBy(sort_by)

    async def load(self) -> bool:
        """
        Fetch tasks for the current scope and all categories concurrently.

        A later load supersedes an earlier one still in flight: results of a
        superseded load are dropped. Returns False when that happened.
        """
        self._load_seq += 1
        token = self._load_seq
        scope = self.category_id
        self.is_loading = True
        self.loading_error = None

        tasks_result, categories_result = await asyncio.gather(
            guarded(lambda: self.data_source.list_tasks(self.session, scope), "Loading tasks"),
            guarded(lambda: self.data_source.list_categories(self.session), "Loading categories"),
        )

        if token != self._load_seq:
            logger.debug("Discarding stale task load seq=%s current=%s", token, self._load_seq)
            return False

        tasks, error = tasks_result
        if error:
            self.tasks = []
            self.loading_error = format_error_message(error)
            self.notifier.error("Failed to load tasks", self.loading_error)
        else:
            self.tasks = list(tasks or [])

        categories, error = categories_result
        if error:
            # Tasks still display, without category labels
            self.categories = []
            self.notifier.error("Failed to load categories", format_error_message(error))
        else:
            self.categories = list(categories or [])

        self.is_loading = False
        return True

    async def set_scope(self, category_id: Optional[uuid.UUID]) -> bool:
        """Switch the category scope (None for all tasks) and reload."""
        self.category_id = category_id
        return await self.load()

    def _find(self, task_id: uuid.UUID) -> Optional[TaskPublic]:
        return next((task for task in self.tasks if task.id == task_id), None)

    def _replace(self, saved: TaskPublic) -> None:
        self.tasks = [saved if task.id == saved.id else task for task in self.tasks]

    def handle_task_saved(self, saved: TaskPublic, created: bool) -> None:
        """
        Reconcile a stored row, whether it came from this controller or the task form.

        A created task is prepended even when it falls outside the current
        category scope; the next load drops it from that scope.
        """
        if created:
            self.tasks = [saved] + self.tasks
        else:
            self._replace(saved)
        if self.on_task_saved is not None:
            self.on_task_saved(saved, created)

    async def create_task(self, task_data: TaskCreate) -> Optional[TaskPublic]:
        task, error = await guarded(
            lambda: self.data_source.create_task(self.session, task_data), "Creating task"
        )
        if error:
            self.notifier.error("Failed to create task", format_error_message(error))
            return None
        self.handle_task_saved(task, created=True)
        self.notifier.success("Task created successfully")
        return task

    async def update_task(self, task_id: uuid.UUID, task_data: TaskUpdate) -> Optional[TaskPublic]:
        task, error = await guarded(
            lambda: self.data_source.update_task(self.session, task_id, task_data), "Updating task"
        )
        if error:
            self.notifier.error("Failed to update task", format_error_message(error))
            return None
        self.handle_task_saved(task, created=False)
        self.notifier.success("Task updated successfully")
        return task

    async def toggle_task(self, task_id: uuid.UUID, completed: Optional[bool] = None) -> Optional[TaskPublic]:
        """
        Set a task's completion state; flips the loaded state when ``completed`` is omitted.

        An overdue due date never blocks the change.
        """
        if completed is None:
            current = self._find(task_id)
            completed = not current.completed if current is not None else True

        task, error = await guarded(
            lambda: self.data_source.toggle_task(self.session, task_id, completed), "Updating task"
        )
        if error:
            self.notifier.error("Failed to update task", format_error_message(error))
            return None
        self.handle_task_saved(task, created=False)
        self.notifier.success("Task completed" if task.completed else "Task marked as pending")
        return task

    async def delete_task(self, task_id: uuid.UUID) -> bool:
        _, error = await guarded(
            lambda: self.data_source.delete_task(self.session, task_id), "Deleting task"
        )
        if error:
            self.notifier.error("Failed to delete task", format_error_message(error))
            return False
        self.tasks = [task for task in self.tasks if task.id != task_id]
        if self.on_task_deleted is not None:
            self.on_task_deleted(task_id)
        self.notifier.success("Task deleted successfully")
        return True

    def handle_category_saved(self, category: CategoryPublic) -> None:
        """Keep labels current after the sidebar creates or edits a category."""
        if any(existing.id == category.id for existing in self.categories):
            self.categories = [category if existing.id == category.id else existing for existing in self.categories]
        else:
            self.categories = self.categories + [category]

    async def handle_category_deleted(self, category_id: uuid.UUID) -> None:
        """
        Mirror a category delete locally.

        The server detaches the category's tasks, so the loaded rows are
        detached the same way instead of re-fetching. If the deleted category
        was the current scope, the scope falls back to all tasks.
        """
        self.categories = [category for category in self.categories if category.id != category_id]
        self.tasks = [
            task.model_copy(update={"category_id": None, "category": None})
            if task.category_id == category_id else task
            for task in self.tasks
        ]
        if self.category_id == category_id:
            await self.set_scope(None)
