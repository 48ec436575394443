# tests/test_task_list.py

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from taskmanager.client.notifications import NotificationType, Notifier
from taskmanager.client.task_list import TaskListController
from taskmanager.models.task import TaskCreate, TaskUpdate
from taskmanager.utils.clock import utcnow
from taskmanager.utils.errors import ErrorType, make_error

from .fakes import FakeDataSource, make_category, make_task


def messages(notifier, kind):
    return [n.message for n in notifier.notifications if n.type == kind]


@pytest.fixture()
def notifier():
    return Notifier()


@pytest.fixture()
def work():
    return make_category("Work")


@pytest.fixture()
def loaded_source(work):
    return FakeDataSource(
        tasks=[
            make_task("Buy groceries", minutes=2),
            make_task("Write report", minutes=1, category_id=work.id),
            make_task("Walk dog", minutes=0, completed=True),
        ],
        categories=[work],
    )


@pytest.fixture()
def controller(loaded_source, user_session, notifier):
    return TaskListController(loaded_source, user_session, notifier)


@pytest.mark.asyncio
async def test_load_fetches_tasks_and_categories(controller, loaded_source):
    assert await controller.load() is True

    assert [t.title for t in controller.tasks] == ["Buy groceries", "Write report", "Walk dog"]
    assert [c.name for c in controller.categories] == ["Work"]
    assert controller.is_loading is False
    assert sorted(loaded_source.calls) == ["list_categories", "list_tasks"]
    assert [v.category.name if v.category else None for v in controller.view] == [None, "Work", None]


@pytest.mark.asyncio
async def test_task_load_failure_leaves_list_empty(controller, loaded_source, notifier):
    loaded_source.fail["list_tasks"] = make_error(ErrorType.DATABASE)

    await controller.load()

    assert controller.tasks == []
    assert controller.loading_error
    assert messages(notifier, NotificationType.ERROR) == ["Failed to load tasks"]
    assert [c.name for c in controller.categories] == ["Work"]


@pytest.mark.asyncio
async def test_category_load_failure_does_not_block_tasks(controller, loaded_source, notifier):
    loaded_source.raise_on["list_categories"] = OperationalError("SELECT", {}, Exception("connection refused"))

    await controller.load()

    assert len(controller.tasks) == 3
    assert controller.categories == []
    assert all(v.category is None for v in controller.view)
    assert messages(notifier, NotificationType.ERROR) == ["Failed to load categories"]
    assert notifier.notifications[0].description.startswith("Connection error")


@pytest.mark.asyncio
async def test_stale_load_is_discarded(controller, loaded_source, work):
    gate = asyncio.Event()
    loaded_source.gates[None] = gate

    slow = asyncio.create_task(controller.load())
    await asyncio.sleep(0)

    assert await controller.set_scope(work.id) is True
    assert [t.title for t in controller.tasks] == ["Write report"]

    gate.set()
    assert await slow is False
    assert [t.title for t in controller.tasks] == ["Write report"]
    assert controller.is_loading is False


@pytest.mark.asyncio
async def test_create_prepends_once_without_refetch(controller, loaded_source, notifier):
    await controller.load()
    loads = loaded_source.calls.count("list_tasks")

    created = await controller.create_task(TaskCreate(title="Call plumber"))

    assert [t.title for t in controller.tasks].count("Call plumber") == 1
    assert controller.tasks[0].id == created.id
    assert loaded_source.calls.count("list_tasks") == loads
    assert messages(notifier, NotificationType.SUCCESS) == ["Task created successfully"]


@pytest.mark.asyncio
async def test_create_outside_scope_shows_until_next_load(controller, work):
    await controller.set_scope(work.id)

    created = await controller.create_task(TaskCreate(title="Call plumber"))

    assert controller.tasks[0].id == created.id
    await controller.load()
    assert [t.title for t in controller.tasks] == ["Write report"]


@pytest.mark.asyncio
async def test_mutations_reach_listeners(controller):
    saved, deleted = [], []
    controller.on_task_saved = lambda task, created: saved.append((task.title, created))
    controller.on_task_deleted = deleted.append
    await controller.load()
    walk = next(t for t in controller.tasks if t.title == "Walk dog")

    await controller.create_task(TaskCreate(title="Call plumber"))
    await controller.toggle_task(walk.id)
    await controller.delete_task(walk.id)

    assert saved == [("Call plumber", True), ("Walk dog", False)]
    assert deleted == [walk.id]

@pytest.mark.asyncio
async def test_failed_mutation_leaves_state_untouched(controller, loaded_source, notifier):
    await controller.load()
    before = list(controller.tasks)
    loaded_source.fail["create_task"] = make_error(ErrorType.VALIDATION, "Title is too long")
    loaded_source.fail["delete_task"] = make_error(ErrorType.NETWORK)

    assert await controller.create_task(TaskCreate(title="x")) is None
    assert await controller.delete_task(before[0].id) is False

    assert controller.tasks == before
    assert [n.description for n in notifier.notifications] == [
        "Title is too long",
        "Connection error. Please check your internet connection",
    ]


@pytest.mark.asyncio
async def test_delete_removes_one_and_preserves_order(controller):
    await controller.load()
    first, middle, last = controller.tasks

    assert await controller.delete_task(middle.id) is True

    assert [t.id for t in controller.tasks] == [first.id, last.id]


@pytest.mark.asyncio
async def test_update_replaces_by_id(controller):
    await controller.load()
    target = controller.tasks[1]

    updated = await controller.update_task(target.id, TaskUpdate(title="Write final report"))

    assert controller.tasks[1].title == "Write final report"
    assert controller.tasks[1].id == updated.id
    assert len(controller.tasks) == 3


@pytest.mark.asyncio
async def test_toggle_overdue_task(controller, loaded_source, notifier):
    overdue = make_task("Pay rent", due_date=utcnow() - timedelta(days=2))
    loaded_source.tasks.append(overdue)
    await controller.load()
    assert next(v for v in controller.view if v.task.id == overdue.id).is_overdue

    toggled = await controller.toggle_task(overdue.id)

    assert toggled.completed is True
    assert toggled.completed_at is not None
    assert not next(v for v in controller.view if v.task.id == overdue.id).is_overdue

    again = await controller.toggle_task(overdue.id)
    assert again.completed is False
    assert again.completed_at is None
    assert messages(notifier, NotificationType.ERROR) == []


@pytest.mark.asyncio
async def test_category_delete_detaches_locally(controller, work):
    await controller.load()

    await controller.handle_category_deleted(work.id)

    assert controller.categories == []
    assert all(t.category_id is None for t in controller.tasks)
    assert len(controller.tasks) == 3


@pytest.mark.asyncio
async def test_deleting_scoped_category_resets_scope(controller, loaded_source, work):
    await controller.set_scope(work.id)
    assert [t.title for t in controller.tasks] == ["Write report"]
    await loaded_source.delete_category(controller.session, work.id)

    await controller.handle_category_deleted(work.id)

    assert controller.category_id is None
    assert len(controller.tasks) == 3


@pytest.mark.asyncio
async def test_view_follows_filters(controller):
    await controller.load()

    controller.set_search_term("WALK")
    assert [v.task.title for v in controller.view] == ["Walk dog"]

    controller.set_search_term("")
    controller.set_filter_status("completed")
    assert [v.task.title for v in controller.view] == ["Walk dog"]

    controller.set_filter_status("all")
    controller.set_sort_by("due_date")
    assert len(controller.view) == 3
