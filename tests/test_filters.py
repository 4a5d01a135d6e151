from __future__ import annotations

from datetime import date, datetime

import pytest

from taskflow.domain.entities import TaskEntity
from taskflow.domain.enums import StatusFilter
from taskflow.domain.filters import TaskFilters, filter_archived, filter_tasks, is_overdue

CREATED = datetime(2026, 3, 1, 9, 0)


def _task(task_id: int, title: str, **kwargs) -> TaskEntity:
    return TaskEntity(id=task_id, title=title, created_at=CREATED, updated_at=CREATED, **kwargs)


TASKS = [
    _task(1, "Write Report", category=1),
    _task(2, "Review report draft", category=2, completed=True),
    _task(3, "Archived report", category=1, completed=True, archived=True),
    _task(4, "Archived open item", category=2, archived=True),
    _task(5, "Dangling category", category=99),
    _task(6, "No category"),
]


def _ids(tasks: list[TaskEntity]) -> list[int]:
    return [task.id for task in tasks]


@pytest.mark.parametrize(
    "filters, expected",
    [
        (TaskFilters(), [1, 2, 5, 6]),
        (TaskFilters(status=StatusFilter.ACTIVE), [1, 5, 6]),
        (TaskFilters(status=StatusFilter.COMPLETED), [2]),
        (TaskFilters(search="report"), [1, 2]),
        (TaskFilters(search="REPORT", status=StatusFilter.COMPLETED), [2]),
        (TaskFilters(category=1), [1]),
        (TaskFilters(category=2, status=StatusFilter.ACTIVE), []),
        (TaskFilters(category=99, search="dangling"), [5]),
    ],
)
def test_filter_tasks(filters: TaskFilters, expected: list[int]) -> None:
    assert _ids(filter_tasks(TASKS, filters)) == expected


@pytest.mark.parametrize("status", list(StatusFilter))
@pytest.mark.parametrize("category", [None, 1, 2])
def test_archived_tasks_never_visible(status: StatusFilter, category: int | None) -> None:
    visible = filter_tasks(TASKS, TaskFilters(search="archived", category=category, status=status))

    assert visible == []


def test_filter_tasks_is_pure() -> None:
    snapshot = list(TASKS)
    filters = TaskFilters(search="re", status=StatusFilter.ALL)

    first = filter_tasks(TASKS, filters)
    second = filter_tasks(TASKS, filters)

    assert first == second
    assert TASKS == snapshot


def test_filter_archived() -> None:
    assert _ids(filter_archived(TASKS)) == [3, 4]
    assert _ids(filter_archived(TASKS, "OPEN")) == [4]


def test_overdue_rules() -> None:
    now = datetime(2026, 3, 10, 23, 59)

    assert is_overdue(_task(1, "No due"), now) is False
    assert is_overdue(_task(2, "Due today", due_date=date(2026, 3, 10)), now) is False
    assert is_overdue(_task(3, "Due tomorrow", due_date=date(2026, 3, 11)), now) is False
    assert is_overdue(_task(4, "Due yesterday", due_date=date(2026, 3, 9)), now) is True


def test_overdue_defaults_to_current_time() -> None:
    assert is_overdue(_task(1, "Today", due_date=date.today())) is False
    assert is_overdue(_task(2, "Long ago", due_date=date(2000, 1, 1))) is True
