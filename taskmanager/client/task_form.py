"""
Task form for the Task Manager client
Validates one task's fields locally and issues the create or update call
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..models.task import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, Priority, TaskCreate, TaskPublic, TaskUpdate
from ..models.user import UserSession
from ..utils.clock import to_naive_utc
from ..utils.errors import format_error_message, validate_required_fields
from .data_source import TaskDataSource
from .notifications import Notifier
from .task_list import guarded

logger = logging.getLogger(__name__)


@dataclass
class TaskFormData:
    """Editable field values"""
    title: str = ""
    description: str = ""
    due_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    priority: Optional[Priority] = Priority.MEDIUM
    category_id: Optional[uuid.UUID] = None

    @classmethod
    def from_task(cls, task: TaskPublic) -> "TaskFormData":
        return cls(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date,
            reminder_date=task.reminder_date,
            priority=task.priority,
            category_id=task.category_id,
        )


class TaskForm:
    """
    Create/edit form for a single task.

    Passing an existing task puts the form in edit mode. ``on_save`` is called
    with the stored row and whether it was newly created.
    """

    def __init__(
        self,
        data_source: TaskDataSource,
        session: UserSession,
        notifier: Notifier,
        task: Optional[TaskPublic] = None,
        on_save: Optional[Callable[[TaskPublic, bool], None]] = None,
    ):
        self.data_source = data_source
        self.session = session
        self.notifier = notifier
        self.task = task
        self.on_save = on_save
        self.data = TaskFormData.from_task(task) if task else TaskFormData()
        self.errors: Dict[str, str] = {}
        self.is_submitting = False

    @property
    def is_edit(self) -> bool:
        return self.task is not None

    def validate(self) -> bool:
        errors: Dict[str, str] = {}

        missing = validate_required_fields({"title": self.data.title}, ["title"])
        if missing:
            errors["title"] = "Title is required"
        elif len(self.data.title.strip()) > TITLE_MAX_LENGTH:
            errors["title"] = f"Title must be less than {TITLE_MAX_LENGTH} characters"

        if len(self.data.description or "") > DESCRIPTION_MAX_LENGTH:
            errors["description"] = f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters"

        due = to_naive_utc(self.data.due_date)
        reminder = to_naive_utc(self.data.reminder_date)
        if due is not None and reminder is not None and reminder > due:
            errors["reminder_date"] = "Reminder date cannot be after due date"

        self.errors = errors
        return not errors

    def build_payload(self) -> Dict[str, Any]:
        """
        Every editable field, with unset optionals as explicit ``None`` so an
        update clears values that were previously set.
        """
        description = (self.data.description or "").strip()
        return {
            "title": self.data.title.strip(),
            "description": description or None,
            "due_date": self.data.due_date,
            "reminder_date": self.data.reminder_date,
            "priority": self.data.priority,
            "category_id": self.data.category_id,
        }

    async def submit(self) -> Optional[TaskPublic]:
        """
        Validate and save.

        Returns the stored task, or None if validation or the call failed.
        Failures are not retried.
        """
        if self.is_submitting:
            return None
        if not self.validate():
            self.notifier.error("Please fix the validation errors", "Check the form fields and try again")
            return None

        payload = self.build_payload()
        self.is_submitting = True
        try:
            if self.is_edit:
                task_id = self.task.id
                result = await guarded(
                    lambda: self.data_source.update_task(self.session, task_id, TaskUpdate(**payload)),
                    "Updating task",
                )
            else:
                result = await guarded(
                    lambda: self.data_source.create_task(self.session, TaskCreate(**payload)),
                    "Creating task",
                )
        finally:
            self.is_submitting = False

        saved, error = result
        if error:
            self.notifier.error(
                "Failed to update task" if self.is_edit else "Failed to create task",
                format_error_message(error),
            )
            return None

        verb = "updated" if self.is_edit else "created"
        self.notifier.success(f"Task {verb} successfully", f'Task "{saved.title}" has been {verb}')
        if self.on_save:
            self.on_save(saved, not self.is_edit)
        return saved
