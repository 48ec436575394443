"""
Task API routes for the Task Manager
Owner-scoped task CRUD, upcoming tasks and completion toggling
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ...database.database import get_session
from ...models.task import TaskCompletion, TaskCreate, TaskPublic, TaskUpdate
from ...models.user import UserSession
from ...services.task_service import TaskService
from ..deps import ensure_owner, get_current_user, raise_for_error

router = APIRouter(tags=["tasks"])


@router.get("/{user_id}/tasks", response_model=List[TaskPublic])
async def list_tasks(
    user_id: uuid.UUID,
    category_id: Optional[uuid.UUID] = Query(default=None, description="Only tasks in this category"),
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """
    List the user's tasks, newest first.

    Args:
        user_id: Owner of the tasks
        category_id: Optional category scope

    Returns:
        Tasks with their category label attached
    """
    ensure_owner(user_id, current_user)
    tasks, error = TaskService.get_tasks_by_user(session, user_id, category_id)
    if error:
        raise_for_error(error)
    return [TaskPublic.from_task(task) for task in tasks]


@router.get("/{user_id}/tasks/upcoming", response_model=List[TaskPublic])
async def list_upcoming_tasks(
    user_id: uuid.UUID,
    days: Optional[int] = Query(default=None, ge=1, le=365),
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Incomplete tasks due within ``days`` days (overdue included), soonest first."""
    ensure_owner(user_id, current_user)
    tasks, error = TaskService.get_upcoming_tasks(session, user_id, days)
    if error:
        raise_for_error(error)
    return [TaskPublic.from_task(task) for task in tasks]


@router.post("/{user_id}/tasks", response_model=TaskPublic, status_code=status.HTTP_201_CREATED)
async def create_task(
    user_id: uuid.UUID,
    task_data: TaskCreate,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    ensure_owner(user_id, current_user, "create tasks for")
    task, error = TaskService.create_task(session, task_data, user_id)
    if error:
        raise_for_error(error)
    return TaskPublic.from_task(task)


@router.get("/{user_id}/tasks/{task_id}", response_model=TaskPublic)
async def get_task(
    user_id: uuid.UUID,
    task_id: uuid.UUID,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    ensure_owner(user_id, current_user)
    task, error = TaskService.get_task_by_id(session, task_id, user_id)
    if error:
        raise_for_error(error)
    return TaskPublic.from_task(task)


@router.patch("/{user_id}/tasks/{task_id}", response_model=TaskPublic)
async def update_task(
    user_id: uuid.UUID,
    task_id: uuid.UUID,
    task_data: TaskUpdate,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """
    Partially update a task.

    Only fields present in the body are written; ``null`` clears an optional field.
    """
    ensure_owner(user_id, current_user, "modify")
    task, error = TaskService.update_task(session, task_id, task_data, user_id)
    if error:
        raise_for_error(error)
    return TaskPublic.from_task(task)


@router.patch("/{user_id}/tasks/{task_id}/complete", response_model=TaskPublic)
async def set_task_completion(
    user_id: uuid.UUID,
    task_id: uuid.UUID,
    completion: TaskCompletion,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    ensure_owner(user_id, current_user, "modify")
    task, error = TaskService.toggle_task_completion(session, task_id, user_id, completion.completed)
    if error:
        raise_for_error(error)
    return TaskPublic.from_task(task)


@router.delete("/{user_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    user_id: uuid.UUID,
    task_id: uuid.UUID,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    ensure_owner(user_id, current_user, "delete")
    _, error = TaskService.delete_task(session, task_id, user_id)
    if error:
        raise_for_error(error)
    return None
