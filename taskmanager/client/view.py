"""
Task view derivation for the Task Manager client
Search, status filter, sort and category join over the loaded task list
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..config import settings
from ..models.category import CategoryPublic
from ..models.task import PRIORITY_RANK, TaskPublic
from ..utils.clock import utcnow

# Tasks without a priority sort after low
MISSING_PRIORITY_RANK = 0


class FilterStatus(str, Enum):
    """Completion filter"""
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class SortBy(str, Enum):
    """Sort orders for the task list"""
    CREATED_AT = "created_at"
    DUE_DATE = "due_date"
    PRIORITY = "priority"


@dataclass(frozen=True)
class TaskView:
    """A task as displayed: its category label and display-only due flags"""
    task: TaskPublic
    category: Optional[CategoryPublic] = None
    is_overdue: bool = False
    is_due_soon: bool = False


def filter_by_search(tasks: Iterable[TaskPublic], search_term: str) -> List[TaskPublic]:
    """Case-insensitive substring match on title or description. An empty term keeps everything."""
    if not search_term:
        return list(tasks)
    term = search_term.lower()
    return [
        task for task in tasks
        if term in task.title.lower() or term in (task.description or "").lower()
    ]


def filter_by_status(tasks: Iterable[TaskPublic], status: FilterStatus) -> List[TaskPublic]:
    status = FilterStatus(status)
    if status == FilterStatus.PENDING:
        return [task for task in tasks if not task.completed]
    if status == FilterStatus.COMPLETED:
        return [task for task in tasks if task.completed]
    return list(tasks)


def _priority_rank(task: TaskPublic) -> int:
    if task.priority is None:
        return MISSING_PRIORITY_RANK
    return PRIORITY_RANK[task.priority]


def sort_tasks(tasks: Iterable[TaskPublic], sort_by: SortBy) -> List[TaskPublic]:
    """
    Sort tasks for display.

    Every order is stable: ties keep the order the tasks were loaded in.

    - created_at: newest first
    - due_date: soonest first, tasks without a due date last
    - priority: high, medium, low, then tasks without a priority
    """
    sort_by = SortBy(sort_by)
    if sort_by == SortBy.DUE_DATE:
        return sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or datetime.min))
    if sort_by == SortBy.PRIORITY:
        return sorted(tasks, key=lambda t: -_priority_rank(t))
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)


def is_overdue(task: TaskPublic, now: datetime) -> bool:
    return not task.completed and task.due_date is not None and task.due_date < now


def is_due_soon(task: TaskPublic, now: datetime, window: timedelta) -> bool:
    return (
        not task.completed
        and task.due_date is not None
        and now <= task.due_date <= now + window
    )


def attach_categories(
    tasks: Iterable[TaskPublic],
    categories: Iterable[CategoryPublic],
    now: Optional[datetime] = None,
    due_soon_hours: Optional[int] = None,
) -> List[TaskView]:
    """
    Join each task to its category in the loaded set.

    A task without a category reference, or whose category is not loaded,
    gets no label.
    """
    by_id: Dict = {category.id: category for category in categories}
    now = now or utcnow()
    window = timedelta(hours=settings.due_soon_hours if due_soon_hours is None else due_soon_hours)
    return [
        TaskView(
            task=task,
            category=by_id.get(task.category_id) if task.category_id else None,
            is_overdue=is_overdue(task, now),
            is_due_soon=is_due_soon(task, now, window),
        )
        for task in tasks
    ]


def derive_view(
    tasks: Iterable[TaskPublic],
    categories: Iterable[CategoryPublic],
    search_term: str = "",
    filter_status: FilterStatus = FilterStatus.ALL,
    sort_by: SortBy = SortBy.CREATED_AT,
    now: Optional[datetime] = None,
    due_soon_hours: Optional[int] = None,
) -> List[TaskView]:
    """Search, then status filter, then sort, then category join."""
    visible = filter_by_search(tasks, search_term)
    visible = filter_by_status(visible, filter_status)
    visible = sort_tasks(visible, sort_by)
    return attach_categories(visible, categories, now=now, due_soon_hours=due_soon_hours)
