from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Generic, Iterable, TypeVar

from taskflow.domain.entities import CategoryEntity, TaskEntity
from taskflow.domain.enums import Priority
from taskflow.domain.errors import NotFoundError, ValidationError
from taskflow.domain.validation import parse_due_date

logger = logging.getLogger(__name__)

# Simulated network latency per operation, in seconds.
LATENCY = {
    "get_all": 0.3,
    "get_by_id": 0.2,
    "create": 0.4,
    "update": 0.3,
    "delete": 0.25,
}

TASK_FIELDS = {"title", "completed", "category", "priority", "due_date", "archived"}
CATEGORY_FIELDS = {"name", "color"}

E = TypeVar("E", TaskEntity, CategoryEntity)


class _InMemoryStore(Generic[E]):
    kind = "record"
    fields: set[str] = set()

    def __init__(
        self,
        seed: Iterable[E] = (),
        latency_scale: float = 1.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._records: dict[int, E] = {record.id: record for record in seed}
        # Ids only ever grow, so a deleted id is never handed out again.
        self._last_id = max(self._records, default=0)
        self._latency_scale = latency_scale
        self._clock = clock

    async def _delay(self, operation: str) -> None:
        await asyncio.sleep(LATENCY[operation] * self._latency_scale)

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def _require(self, entity_id: int) -> E:
        record = self._records.get(entity_id)
        if record is None:
            raise NotFoundError(self.kind, entity_id)
        return record

    def _clean(self, fields: dict) -> dict:
        return {key: value for key, value in fields.items() if key in self.fields}

    def _present(self, record: E) -> E:
        return record

    def _ordered(self) -> list[E]:
        return list(self._records.values())

    async def get_all(self) -> list[E]:
        await self._delay("get_all")
        return [self._present(record) for record in self._ordered()]

    async def get_by_id(self, entity_id: int) -> E:
        await self._delay("get_by_id")
        return self._present(self._require(entity_id))

    async def update(self, entity_id: int, fields: dict) -> E:
        await self._delay("update")
        record = replace(self._require(entity_id), **self._normalize(self._clean(fields)))
        if isinstance(record, TaskEntity):
            record = replace(record, updated_at=self._clock())
        self._records[entity_id] = record
        logger.debug("Updated %s %s", self.kind, entity_id)
        return self._present(record)

    async def delete(self, entity_id: int) -> bool:
        await self._delay("delete")
        self._require(entity_id)
        del self._records[entity_id]
        logger.debug("Deleted %s %s", self.kind, entity_id)
        return True

    def _normalize(self, fields: dict) -> dict:
        return fields


class InMemoryTaskStore(_InMemoryStore[TaskEntity]):
    kind = "task"
    fields = TASK_FIELDS

    async def create(self, fields: dict) -> TaskEntity:
        await self._delay("create")
        now = self._clock()
        data = self._normalize(self._clean(fields))
        if not data.get("title"):
            raise ValidationError("Title is required", field="title")
        task = TaskEntity(id=self._next_id(), created_at=now, updated_at=now, **data)
        self._records[task.id] = task
        logger.debug("Created task %s", task.id)
        return task

    def snapshot(self) -> list[TaskEntity]:
        return list(self._records.values())

    def _ordered(self) -> list[TaskEntity]:
        # Newest first, same as the database backend.
        return sorted(
            self._records.values(),
            key=lambda task: (task.created_at, task.id),
            reverse=True,
        )

    def _normalize(self, fields: dict) -> dict:
        normalized = dict(fields)
        if "priority" in normalized:
            normalized["priority"] = Priority(normalized["priority"] or Priority.MEDIUM)
        if "due_date" in normalized:
            normalized["due_date"] = parse_due_date(normalized["due_date"])
        if "completed" in normalized:
            normalized["completed"] = bool(normalized["completed"])
        if "archived" in normalized:
            normalized["archived"] = bool(normalized["archived"])
        return normalized


class InMemoryCategoryStore(_InMemoryStore[CategoryEntity]):
    """Categories whose counters are derived from a task store on every read."""

    kind = "category"
    fields = CATEGORY_FIELDS

    def __init__(
        self,
        task_store: InMemoryTaskStore,
        seed: Iterable[CategoryEntity] = (),
        latency_scale: float = 1.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(seed, latency_scale=latency_scale, clock=clock)
        self._task_store = task_store

    async def create(self, fields: dict) -> CategoryEntity:
        await self._delay("create")
        data = self._clean(fields)
        category = CategoryEntity(
            id=self._next_id(),
            name=data.get("name", ""),
            color=data.get("color", ""),
        )
        self._records[category.id] = category
        logger.debug("Created category %s", category.id)
        return self._present(category)

    def _present(self, record: CategoryEntity) -> CategoryEntity:
        live = [
            task
            for task in self._task_store.snapshot()
            if task.category == record.id and not task.archived
        ]
        completed = sum(1 for task in live if task.completed)
        return replace(
            record,
            task_count=len(live),
            active_tasks=len(live) - completed,
            completed_tasks=completed,
        )
