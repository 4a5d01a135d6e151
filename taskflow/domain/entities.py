from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .enums import Priority


@dataclass(frozen=True)
class TaskEntity:
    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    completed: bool = False
    category: int | None = None
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = None
    archived: bool = False


@dataclass(frozen=True)
class CategoryEntity:
    id: int
    name: str
    color: str
    task_count: int = 0
    active_tasks: int = 0
    completed_tasks: int = 0
