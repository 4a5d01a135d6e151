from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from .entities import TaskEntity
from .enums import StatusFilter


@dataclass(frozen=True)
class TaskFilters:
    search: str = ""
    category: Optional[int] = None
    status: StatusFilter = StatusFilter.ALL


def _matches_search(task: TaskEntity, search: str) -> bool:
    return not search or search.lower() in task.title.lower()


def _matches_status(task: TaskEntity, status: StatusFilter) -> bool:
    if status == StatusFilter.ACTIVE:
        return not task.completed and not task.archived
    if status == StatusFilter.COMPLETED:
        return task.completed and not task.archived
    return not task.archived


def filter_tasks(tasks: Iterable[TaskEntity], filters: TaskFilters) -> list[TaskEntity]:
    return [
        task
        for task in tasks
        if _matches_search(task, filters.search)
        and (filters.category is None or task.category == filters.category)
        and _matches_status(task, filters.status)
    ]


def filter_archived(tasks: Iterable[TaskEntity], search: str = "") -> list[TaskEntity]:
    return [task for task in tasks if task.archived and _matches_search(task, search)]


def is_overdue(task: TaskEntity, now: datetime | None = None) -> bool:
    # A task due today is never overdue, even late in the evening.
    if task.due_date is None:
        return False
    now = now or datetime.now()
    return now.date() > task.due_date
