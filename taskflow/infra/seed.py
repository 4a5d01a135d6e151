from __future__ import annotations

from datetime import date, datetime

from taskflow.domain.entities import CategoryEntity, TaskEntity
from taskflow.domain.enums import Priority

SEED_CATEGORIES = [
    CategoryEntity(id=1, name="Work", color="#5B21B6"),
    CategoryEntity(id=2, name="Personal", color="#8B5CF6"),
    CategoryEntity(id=3, name="Shopping", color="#F59E0B"),
    CategoryEntity(id=4, name="Health", color="#10B981"),
]

SEED_TASKS = [
    TaskEntity(
        id=1,
        title="Prepare quarterly report",
        category=1,
        priority=Priority.HIGH,
        due_date=date(2024, 7, 15),
        created_at=datetime(2024, 7, 1, 9, 0),
        updated_at=datetime(2024, 7, 1, 9, 0),
    ),
    TaskEntity(
        id=2,
        title="Review pull requests",
        category=1,
        completed=True,
        created_at=datetime(2024, 7, 2, 10, 30),
        updated_at=datetime(2024, 7, 3, 16, 45),
    ),
    TaskEntity(
        id=3,
        title="Call the dentist",
        category=4,
        priority=Priority.LOW,
        due_date=date(2024, 7, 10),
        created_at=datetime(2024, 7, 2, 12, 0),
        updated_at=datetime(2024, 7, 2, 12, 0),
    ),
    TaskEntity(
        id=4,
        title="Buy groceries",
        category=3,
        created_at=datetime(2024, 7, 3, 8, 15),
        updated_at=datetime(2024, 7, 3, 8, 15),
    ),
    TaskEntity(
        id=5,
        title="Plan weekend trip",
        category=2,
        priority=Priority.LOW,
        created_at=datetime(2024, 7, 4, 19, 0),
        updated_at=datetime(2024, 7, 4, 19, 0),
    ),
    TaskEntity(
        id=6,
        title="Morning run",
        category=4,
        completed=True,
        created_at=datetime(2024, 7, 5, 6, 30),
        updated_at=datetime(2024, 7, 5, 7, 10),
    ),
    TaskEntity(
        id=7,
        title="Renew gym membership",
        category=4,
        completed=True,
        archived=True,
        created_at=datetime(2024, 6, 20, 18, 0),
        updated_at=datetime(2024, 6, 28, 18, 30),
    ),
    TaskEntity(
        id=8,
        title="Update project roadmap",
        category=1,
        priority=Priority.HIGH,
        due_date=date(2024, 7, 20),
        created_at=datetime(2024, 7, 6, 11, 0),
        updated_at=datetime(2024, 7, 6, 11, 0),
    ),
]
