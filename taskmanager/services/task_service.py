"""
Task service module for the Task Manager
Owner-scoped task queries and mutations returning (data, error) results
"""
import uuid
from datetime import timedelta
from typing import List, Optional

from sqlmodel import Session, select

from ..config import settings
from ..models.category import Category
from ..models.task import Task, TaskCreate, TaskUpdate
from ..utils.clock import utcnow
from ..utils.errors import CategoryNotFoundException, PermissionDeniedException, TaskNotFoundException
from ..utils.logging import log_error
from .result import TRANSPORT_ERRORS, ServiceResult, failure_result

# Columns that may be omitted from an update but never cleared
NON_NULLABLE_FIELDS = ("title", "completed")


def _stamp_completion(task: Task, completed: bool) -> None:
    task.completed = completed
    task.completed_at = utcnow() if completed else None


class TaskService:
    """Service class for task operations"""

    @staticmethod
    def _get_owned_task(db: Session, task_id: uuid.UUID, user_id: uuid.UUID) -> Task:
        statement = select(Task).where(Task.id == task_id, Task.user_id == user_id)
        task = db.exec(statement).first()
        if not task:
            raise TaskNotFoundException(task_id)
        return task

    @staticmethod
    def _check_category(db: Session, category_id: Optional[uuid.UUID], user_id: uuid.UUID) -> None:
        """A task may only reference one of its owner's categories."""
        if category_id is None:
            return
        category = db.get(Category, category_id)
        if category is None:
            raise CategoryNotFoundException(category_id)
        if category.user_id != user_id:
            raise PermissionDeniedException(f"Category {category_id} belongs to another user")

    @staticmethod
    def get_tasks_by_user(
        db: Session,
        user_id: uuid.UUID,
        category_id: Optional[uuid.UUID] = None,
    ) -> ServiceResult[List[Task]]:
        """
        Get all tasks for a user, optionally scoped to one category.

        Args:
            db: Database session
            user_id: Owner of the tasks
            category_id: Only return tasks in this category

        Returns:
            Tasks ordered newest-created first
        """
        context = "TaskService.get_tasks_by_user"
        try:
            statement = select(Task).where(Task.user_id == user_id)
            if category_id is not None:
                statement = statement.where(Task.category_id == category_id)
            statement = statement.order_by(Task.created_at.desc())
            return ServiceResult.success(list(db.exec(statement).all()))
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def get_upcoming_tasks(
        db: Session,
        user_id: uuid.UUID,
        days: Optional[int] = None,
    ) -> ServiceResult[List[Task]]:
        """
        Get incomplete tasks due within the next ``days`` days.

        Tasks that are already overdue are included. Tasks without a due date
        are not.

        Returns:
            Tasks ordered soonest-due first
        """
        context = "TaskService.get_upcoming_tasks"
        window = settings.upcoming_days if days is None else days
        try:
            horizon = utcnow() + timedelta(days=window)
            statement = (
                select(Task)
                .where(
                    Task.user_id == user_id,
                    Task.completed == False,  # noqa: E712
                    Task.due_date.is_not(None),
                    Task.due_date <= horizon,
                )
                .order_by(Task.due_date.asc())
            )
            return ServiceResult.success(list(db.exec(statement).all()))
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def get_task_by_id(db: Session, task_id: uuid.UUID, user_id: uuid.UUID) -> ServiceResult[Task]:
        """
        Get a specific task by ID for a specific user.

        A task owned by another user is reported as NOT_FOUND.
        """
        context = f"TaskService.get_task_by_id (id={task_id})"
        try:
            return ServiceResult.success(TaskService._get_owned_task(db, task_id, user_id))
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def create_task(db: Session, task_data: TaskCreate, user_id: uuid.UUID) -> ServiceResult[Task]:
        """
        Create a new task for a user.

        Args:
            db: Database session
            task_data: Every task field except identifier and timestamps
            user_id: Owner of the new task

        Returns:
            The stored task, including the server-assigned id and timestamps
        """
        context = "TaskService.create_task"
        try:
            TaskService._check_category(db, task_data.category_id, user_id)

            task = Task(**task_data.model_dump(), user_id=user_id)
            if task.completed:
                task.completed_at = task.created_at

            db.add(task)
            db.commit()
            db.refresh(task)
            return ServiceResult.success(task)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def update_task(
        db: Session,
        task_id: uuid.UUID,
        task_data: TaskUpdate,
        user_id: uuid.UUID,
    ) -> ServiceResult[Task]:
        """
        Apply a partial update to a task.

        Only fields that were explicitly set are written; an explicit ``None``
        clears an optional field. Changing ``completed`` keeps ``completed_at``
        in step.
        """
        context = f"TaskService.update_task (id={task_id})"
        try:
            task = TaskService._get_owned_task(db, task_id, user_id)

            update_dict = task_data.model_dump(exclude_unset=True)
            for name in NON_NULLABLE_FIELDS:
                if name in update_dict and update_dict[name] is None:
                    del update_dict[name]

            if "category_id" in update_dict:
                TaskService._check_category(db, update_dict["category_id"], user_id)

            completed = update_dict.pop("completed", None)
            for field, value in update_dict.items():
                setattr(task, field, value)
            if completed is not None and completed != task.completed:
                _stamp_completion(task, completed)

            task.updated_at = utcnow()

            db.add(task)
            db.commit()
            db.refresh(task)
            return ServiceResult.success(task)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def toggle_task_completion(
        db: Session,
        task_id: uuid.UUID,
        user_id: uuid.UUID,
        completed: Optional[bool] = None,
    ) -> ServiceResult[Task]:
        """
        Set a task's completion state.

        ``completed_at`` is stamped or cleared in the same commit as
        ``updated_at``. When ``completed`` is omitted the current state is
        flipped. An overdue due date never blocks the change.
        """
        context = f"TaskService.toggle_task_completion (id={task_id})"
        try:
            task = TaskService._get_owned_task(db, task_id, user_id)

            target = (not task.completed) if completed is None else completed
            now = utcnow()
            task.completed = target
            task.completed_at = now if target else None
            task.updated_at = now

            db.add(task)
            db.commit()
            db.refresh(task)
            return ServiceResult.success(task)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def delete_task(db: Session, task_id: uuid.UUID, user_id: uuid.UUID) -> ServiceResult[uuid.UUID]:
        """Permanently delete a task. Returns the deleted task's id."""
        context = f"TaskService.delete_task (id={task_id})"
        try:
            task = TaskService._get_owned_task(db, task_id, user_id)
            db.delete(task)
            db.commit()
            return ServiceResult.success(task_id)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)
