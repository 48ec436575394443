# tests/test_view.py

import random
from datetime import timedelta

import pytest

from taskmanager.client.view import (
    FilterStatus,
    SortBy,
    attach_categories,
    derive_view,
    filter_by_search,
    filter_by_status,
    sort_tasks,
)
from taskmanager.models.task import Priority

from .fakes import BASE_TIME, make_category, make_task


def titles(tasks):
    return [t.title for t in tasks]


def test_pending_filter_scenario():
    tasks = [make_task("Buy groceries"), make_task("Walk dog", completed=True)]

    view = derive_view(tasks, [], filter_status=FilterStatus.PENDING)

    assert [v.task.title for v in view] == ["Buy groceries"]


def test_status_filter_partitions():
    tasks = [make_task(f"t{i}", completed=i % 3 == 0) for i in range(10)]

    pending = filter_by_status(tasks, FilterStatus.PENDING)
    completed = filter_by_status(tasks, FilterStatus.COMPLETED)

    assert not set(titles(pending)) & set(titles(completed))
    assert sorted(titles(pending) + titles(completed)) == sorted(titles(tasks))
    assert titles(filter_by_status(tasks, "all")) == titles(tasks)


def test_search_is_case_insensitive_over_title_or_description():
    tasks = [
        make_task("Buy GROCERIES"),
        make_task("Call mum", description="about groceries"),
        make_task("Walk dog"),
    ]

    assert titles(filter_by_search(tasks, "groceries")) == ["Buy GROCERIES", "Call mum"]
    assert titles(filter_by_search(tasks, "DOG")) == ["Walk dog"]
    assert filter_by_search(tasks, "dentist") == []
    assert titles(filter_by_search(tasks, "")) == titles(tasks)


def test_search_term_is_not_trimmed():
    tasks = [make_task("Walk dog"), make_task("Dogma")]

    assert titles(filter_by_search(tasks, " dog")) == ["Walk dog"]


def test_created_sort_is_newest_first():
    tasks = [make_task("old", minutes=0), make_task("new", minutes=10), make_task("mid", minutes=5)]

    assert titles(sort_tasks(tasks, SortBy.CREATED_AT)) == ["new", "mid", "old"]


def test_due_date_sort_puts_missing_last():
    tasks = [
        make_task("none-1"),
        make_task("late", due_date=BASE_TIME + timedelta(days=5)),
        make_task("none-2"),
        make_task("early", due_date=BASE_TIME + timedelta(days=1)),
    ]

    assert titles(sort_tasks(tasks, SortBy.DUE_DATE)) == ["early", "late", "none-1", "none-2"]


def test_due_date_sort_never_puts_missing_first_for_random_input():
    rng = random.Random(7)
    tasks = [
        make_task(f"t{i}", due_date=BASE_TIME + timedelta(hours=rng.randint(0, 100)) if rng.random() < 0.5 else None)
        for i in range(30)
    ]

    ordered = sort_tasks(tasks, SortBy.DUE_DATE)
    seen_missing = False
    for task in ordered:
        if task.due_date is None:
            seen_missing = True
        else:
            assert not seen_missing


def test_priority_sort_groups_and_keeps_load_order():
    tasks = [
        make_task("low-1", priority=Priority.LOW),
        make_task("high-1", priority=Priority.HIGH),
        make_task("none", priority=None),
        make_task("medium-1", priority=Priority.MEDIUM),
        make_task("high-2", priority=Priority.HIGH),
        make_task("low-2", priority=Priority.LOW),
    ]

    assert titles(sort_tasks(tasks, SortBy.PRIORITY)) == [
        "high-1", "high-2", "medium-1", "low-1", "low-2", "none",
    ]


@pytest.mark.parametrize("seed", range(5))
def test_priority_sort_for_any_multiset(seed):
    rng = random.Random(seed)
    tasks = [make_task(f"t{i}", priority=rng.choice(list(Priority))) for i in range(25)]
    rank = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}

    ranks = [rank[t.priority] for t in sort_tasks(tasks, SortBy.PRIORITY)]

    assert ranks == sorted(ranks, reverse=True)


def test_category_join():
    work = make_category("Work")
    tasks = [
        make_task("labelled", category_id=work.id),
        make_task("orphan", category_id=make_category("Gone").id),
        make_task("plain"),
    ]

    view = attach_categories(tasks, [work], now=BASE_TIME)

    assert [v.category.name if v.category else None for v in view] == ["Work", None, None]


def test_due_flags_are_display_only():
    now = BASE_TIME
    tasks = [
        make_task("overdue", due_date=now - timedelta(hours=1)),
        make_task("soon", due_date=now + timedelta(hours=3)),
        make_task("later", due_date=now + timedelta(days=3)),
        make_task("done late", due_date=now - timedelta(hours=1), completed=True),
    ]

    flags = {v.task.title: (v.is_overdue, v.is_due_soon) for v in attach_categories(tasks, [], now=now)}

    assert flags == {
        "overdue": (True, False),
        "soon": (False, True),
        "later": (False, False),
        "done late": (False, False),
    }


def test_derive_view_applies_every_step():
    work = make_category("Work")
    tasks = [
        make_task("report draft", priority=Priority.LOW, category_id=work.id),
        make_task("report final", priority=Priority.HIGH, category_id=work.id),
        make_task("report done", priority=Priority.HIGH, completed=True),
        make_task("groceries", priority=Priority.HIGH),
    ]

    view = derive_view(
        tasks, [work], search_term="Report", filter_status="pending", sort_by="priority", now=BASE_TIME
    )

    assert [(v.task.title, v.category.name) for v in view] == [
        ("report final", "Work"),
        ("report draft", "Work"),
    ]
