from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from .entities import CategoryEntity, TaskEntity
from .enums import StatusFilter
from .filters import TaskFilters, filter_tasks


@dataclass(frozen=True)
class TaskCounters:
    completed_today: int
    total_active: int
    total_completed: int
    category_active: int
    category_completed: int


def compute_counters(
    tasks: Sequence[TaskEntity],
    categories: Sequence[CategoryEntity],
    today: date | None = None,
) -> TaskCounters:
    today = today or date.today()
    # completed_today does not look at ``archived``: archived tasks finished
    # today still count towards the daily progress.
    completed_today = sum(
        1 for task in tasks if task.completed and task.updated_at.date() == today
    )
    total_active = sum(1 for task in tasks if not task.completed and not task.archived)
    total_completed = sum(1 for task in tasks if task.completed and not task.archived)
    return TaskCounters(
        completed_today=completed_today,
        total_active=total_active,
        total_completed=total_completed,
        category_active=sum(category.active_tasks or 0 for category in categories),
        category_completed=sum(category.completed_tasks or 0 for category in categories),
    )


def category_task_counts(categories: Sequence[CategoryEntity]) -> dict[int, int]:
    return {category.id: category.task_count or 0 for category in categories}


def status_counts(tasks: Sequence[TaskEntity], filters: TaskFilters) -> dict[StatusFilter, int]:
    """Counts shown on the status tabs.

    The "all" tab reports the size of the current filtered view, the other two
    report global totals regardless of search and category.
    """
    return {
        StatusFilter.ALL: len(filter_tasks(tasks, filters)),
        StatusFilter.ACTIVE: sum(1 for t in tasks if not t.completed and not t.archived),
        StatusFilter.COMPLETED: sum(1 for t in tasks if t.completed and not t.archived),
    }
