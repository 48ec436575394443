# tests/test_task_service.py

import uuid
from datetime import timedelta

from taskmanager.models import Category, Task, TaskCreate, TaskUpdate
from taskmanager.models.task import Priority
from taskmanager.services.task_service import TaskService
from taskmanager.utils.clock import utcnow
from taskmanager.utils.errors import ErrorType


def add_task(db, user_id, title, **fields):
    task = Task(title=title, user_id=user_id, **fields)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def test_create_assigns_identity_and_timestamps(session, bare_user_id):
    task, error = TaskService.create_task(session, TaskCreate(title="  Buy milk  "), bare_user_id)

    assert error is None
    assert isinstance(task.id, uuid.UUID)
    assert task.title == "Buy milk"
    assert task.priority == Priority.MEDIUM
    assert task.created_at is not None
    assert task.completed_at is None


def test_list_is_newest_first_and_owner_scoped(session, bare_user_id, other_user_id):
    now = utcnow()
    add_task(session, bare_user_id, "old", created_at=now - timedelta(days=2))
    add_task(session, bare_user_id, "new", created_at=now)
    add_task(session, bare_user_id, "middle", created_at=now - timedelta(days=1))
    add_task(session, other_user_id, "not mine")

    tasks, error = TaskService.get_tasks_by_user(session, bare_user_id)

    assert error is None
    assert [t.title for t in tasks] == ["new", "middle", "old"]


def test_list_scoped_to_category(session, bare_user_id):
    category = Category(name="Work", user_id=bare_user_id)
    session.add(category)
    session.commit()
    add_task(session, bare_user_id, "in", category_id=category.id)
    add_task(session, bare_user_id, "out")

    tasks, _ = TaskService.get_tasks_by_user(session, bare_user_id, category.id)

    assert [t.title for t in tasks] == ["in"]


def test_get_foreign_task_is_not_found(session, bare_user_id, other_user_id):
    task = add_task(session, other_user_id, "private")

    data, error = TaskService.get_task_by_id(session, task.id, bare_user_id)

    assert data is None
    assert error.type == ErrorType.NOT_FOUND


def test_upcoming_includes_overdue_and_excludes_the_rest(session, bare_user_id):
    now = utcnow()
    add_task(session, bare_user_id, "in three days", due_date=now + timedelta(days=3))
    add_task(session, bare_user_id, "overdue", due_date=now - timedelta(days=1))
    add_task(session, bare_user_id, "tomorrow", due_date=now + timedelta(days=1))
    add_task(session, bare_user_id, "next month", due_date=now + timedelta(days=30))
    add_task(session, bare_user_id, "done", due_date=now + timedelta(days=1), completed=True, completed_at=now)
    add_task(session, bare_user_id, "no due date")

    tasks, error = TaskService.get_upcoming_tasks(session, bare_user_id)

    assert error is None
    assert [t.title for t in tasks] == ["overdue", "tomorrow", "in three days"]

    tasks, _ = TaskService.get_upcoming_tasks(session, bare_user_id, days=60)
    assert [t.title for t in tasks][-1] == "next month"


def test_toggle_keeps_completed_at_in_step(session, bare_user_id):
    task = add_task(session, bare_user_id, "Walk dog")

    task, error = TaskService.toggle_task_completion(session, task.id, bare_user_id, True)
    assert error is None
    assert task.completed is True
    assert task.completed_at is not None
    assert task.updated_at == task.completed_at

    task, _ = TaskService.toggle_task_completion(session, task.id, bare_user_id, False)
    assert task.completed is False
    assert task.completed_at is None

    task, _ = TaskService.toggle_task_completion(session, task.id, bare_user_id)
    assert task.completed is True
    assert task.completed_at is not None


def test_toggle_overdue_task_succeeds(session, bare_user_id):
    task = add_task(session, bare_user_id, "late", due_date=utcnow() - timedelta(days=3))

    task, error = TaskService.toggle_task_completion(session, task.id, bare_user_id, True)

    assert error is None
    assert task.completed is True


def test_update_writes_only_set_fields_and_clears_explicit_nulls(session, bare_user_id):
    due = utcnow() + timedelta(days=1)
    task = add_task(session, bare_user_id, "Report", description="draft", due_date=due)

    task, error = TaskService.update_task(
        session, task.id, TaskUpdate(description=None, priority=Priority.HIGH), bare_user_id
    )

    assert error is None
    assert task.description is None
    assert task.priority == Priority.HIGH
    assert task.due_date == due
    assert task.title == "Report"


def test_update_completion_stamps_completed_at(session, bare_user_id):
    task = add_task(session, bare_user_id, "Report")

    task, _ = TaskService.update_task(session, task.id, TaskUpdate(completed=True), bare_user_id)
    assert task.completed_at is not None

    task, _ = TaskService.update_task(session, task.id, TaskUpdate(completed=False), bare_user_id)
    assert task.completed_at is None


def test_foreign_category_reference_is_rejected(session, bare_user_id, other_user_id):
    foreign = Category(name="Theirs", user_id=other_user_id)
    session.add(foreign)
    session.commit()

    data, error = TaskService.create_task(
        session, TaskCreate(title="sneaky", category_id=foreign.id), bare_user_id
    )

    assert data is None
    assert error.type == ErrorType.AUTHORIZATION


def test_missing_category_reference_is_not_found(session, bare_user_id):
    _, error = TaskService.create_task(session, TaskCreate(title="x", category_id=uuid.uuid4()), bare_user_id)

    assert error.type == ErrorType.NOT_FOUND


def test_delete_is_hard(session, bare_user_id):
    task = add_task(session, bare_user_id, "gone")

    deleted_id, error = TaskService.delete_task(session, task.id, bare_user_id)
    assert error is None
    assert deleted_id == task.id

    _, error = TaskService.get_task_by_id(session, task.id, bare_user_id)
    assert error.type == ErrorType.NOT_FOUND

    _, error = TaskService.delete_task(session, task.id, bare_user_id)
    assert error.type == ErrorType.NOT_FOUND
