"""
Data source module for the Task Manager client
The async interface the controllers talk to, and its implementation over the service layer
"""
import asyncio
import uuid
from typing import Callable, Generator, List, Optional, Protocol

from sqlmodel import Session

from ..database.database import get_session
from ..models.category import CategoryCreate, CategoryPublic, CategoryUpdate
from ..models.task import TaskCreate, TaskPublic, TaskUpdate
from ..models.user import UserSession
from ..services.category_service import CategoryService
from ..services.result import ServiceResult
from ..services.task_service import TaskService


class TaskDataSource(Protocol):
    """
    Everything the client controllers need from the data access layer.

    Every call resolves to a ServiceResult; only transport failures raise.
    """

    async def list_tasks(
        self, session: UserSession, category_id: Optional[uuid.UUID] = None
    ) -> ServiceResult[List[TaskPublic]]: ...

    async def list_categories(self, session: UserSession) -> ServiceResult[List[CategoryPublic]]: ...

    async def create_task(self, session: UserSession, task_data: TaskCreate) -> ServiceResult[TaskPublic]: ...

    async def update_task(
        self, session: UserSession, task_id: uuid.UUID, task_data: TaskUpdate
    ) -> ServiceResult[TaskPublic]: ...

    async def toggle_task(
        self, session: UserSession, task_id: uuid.UUID, completed: bool
    ) -> ServiceResult[TaskPublic]: ...

    async def delete_task(self, session: UserSession, task_id: uuid.UUID) -> ServiceResult[uuid.UUID]: ...

    async def create_category(
        self, session: UserSession, category_data: CategoryCreate
    ) -> ServiceResult[CategoryPublic]: ...

    async def update_category(
        self, session: UserSession, category_id: uuid.UUID, category_data: CategoryUpdate
    ) -> ServiceResult[CategoryPublic]: ...

    async def delete_category(self, session: UserSession, category_id: uuid.UUID) -> ServiceResult[uuid.UUID]: ...


def _public(result: ServiceResult, convert: Callable) -> ServiceResult:
    """Detach ORM rows from their session before they leave the worker thread."""
    if result.error is not None:
        return result
    if isinstance(result.data, list):
        return ServiceResult.success([convert(item) for item in result.data])
    return ServiceResult.success(convert(result.data))


def _category_public(category) -> CategoryPublic:
    return CategoryPublic.model_validate(category.model_dump())


class ServiceDataSource:
    """
    TaskDataSource backed by the service classes.

    Each call opens its own database session and runs the blocking service
    call in a worker thread, so concurrent loads do not block the event loop.
    """

    def __init__(self, session_factory: Callable[[], Generator[Session, None, None]] = get_session):
        self.session_factory = session_factory

    def _run(self, operation: Callable[[Session], ServiceResult]) -> ServiceResult:
        session_gen = self.session_factory()
        db = next(session_gen)
        try:
            return operation(db)
        finally:
            try:
                next(session_gen)
            except StopIteration:
                pass

    async def _call(self, operation: Callable[[Session], ServiceResult]) -> ServiceResult:
        return await asyncio.to_thread(self._run, operation)

    async def list_tasks(self, session, category_id=None):
        return await self._call(lambda db: _public(
            TaskService.get_tasks_by_user(db, session.user_id, category_id), TaskPublic.from_task
        ))

    async def list_categories(self, session):
        return await self._call(lambda db: _public(
            CategoryService.get_categories_by_user(db, session.user_id), _category_public
        ))

    async def create_task(self, session, task_data):
        return await self._call(lambda db: _public(
            TaskService.create_task(db, task_data, session.user_id), TaskPublic.from_task
        ))

    async def update_task(self, session, task_id, task_data):
        return await self._call(lambda db: _public(
            TaskService.update_task(db, task_id, task_data, session.user_id), TaskPublic.from_task
        ))

    async def toggle_task(self, session, task_id, completed):
        return await self._call(lambda db: _public(
            TaskService.toggle_task_completion(db, task_id, session.user_id, completed), TaskPublic.from_task
        ))

    async def delete_task(self, session, task_id):
        return await self._call(lambda db: TaskService.delete_task(db, task_id, session.user_id))

    async def create_category(self, session, category_data):
        return await self._call(lambda db: _public(
            CategoryService.create_category(db, category_data, session.user_id), _category_public
        ))

    async def update_category(self, session, category_id, category_data):
        return await self._call(lambda db: _public(
            CategoryService.update_category(db, category_id, category_data, session.user_id), _category_public
        ))

    async def delete_category(self, session, category_id):
        return await self._call(lambda db: CategoryService.delete_category(db, category_id, session.user_id))
