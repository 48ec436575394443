"""
View routes for the Task Manager
The dashboard snapshot, the sign-in/sign-up view endpoints and the health check
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session, SQLModel

from ...database.database import get_session
from ...models.category import CategoryWithCount
from ...models.task import TaskPublic
from ...models.user import UserSession
from ...services.category_service import CategoryService
from ...services.task_service import TaskService
from ..deps import get_current_user, raise_for_error

router = APIRouter()


class DashboardSnapshot(SQLModel):
    """Everything the dashboard shows on first paint"""
    user: UserSession
    tasks: List[TaskPublic]
    categories: List[CategoryWithCount]
    total_tasks: int


@router.get("/dashboard", response_model=DashboardSnapshot, tags=["views"])
async def dashboard(
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """
    Tasks and categories with counts for the signed-in user.

    Unauthenticated requests never reach this handler; the session gate
    redirects them to the sign-in view.
    """
    tasks, error = TaskService.get_tasks_by_user(session, current_user.user_id)
    if error:
        raise_for_error(error)
    categories, error = CategoryService.get_categories_with_task_counts(session, current_user.user_id)
    if error:
        raise_for_error(error)
    return DashboardSnapshot(
        user=current_user,
        tasks=[TaskPublic.from_task(task) for task in tasks],
        categories=categories,
        total_tasks=len(tasks),
    )


@router.get("/auth/login", tags=["views"])
async def login_view():
    return {"view": "login", "action": "/api/auth/signin"}


@router.get("/auth/signup", tags=["views"])
async def signup_view():
    return {"view": "signup", "action": "/api/auth/signup"}


@router.get("/health", tags=["health"])
async def health_check():
    return {"status": "healthy"}
