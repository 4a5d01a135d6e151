from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from taskflow.domain.entities import CategoryEntity, TaskEntity
from taskflow.domain.enums import Priority
from taskflow.domain.errors import LoadError, MutationError, NotFoundError, ValidationError
from taskflow.domain.validation import parse_due_date

from .models import CategoryModel, TaskModel

logger = logging.getLogger(__name__)

# domain field -> column
TASK_COLUMNS = {
    "title": "title",
    "completed": "completed",
    "category": "category_id",
    "priority": "priority",
    "due_date": "due_date",
    "archived": "archived",
}
CATEGORY_COLUMNS = {"name": "name", "color": "color"}


def _to_task_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        completed=bool(model.completed),
        category=model.category_id,
        priority=Priority(model.priority),
        due_date=model.due_date,
        archived=bool(model.archived),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _to_category_entity(model: CategoryModel, counts: tuple[int, int] = (0, 0)) -> CategoryEntity:
    total, completed = counts
    return CategoryEntity(
        id=model.id,
        name=model.name,
        color=model.color,
        task_count=total,
        active_tasks=total - completed,
        completed_tasks=completed,
    )


def _coerce_fk(value: object) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid category: {value}", field="category") from exc


def _to_task_columns(fields: dict) -> dict:
    columns = {}
    for key, value in fields.items():
        column = TASK_COLUMNS.get(key)
        if column is None:
            continue
        if key == "category":
            value = _coerce_fk(value)
        elif key == "priority":
            try:
                value = Priority(value or Priority.MEDIUM).value
            except ValueError as exc:
                raise ValidationError(f"Unknown priority: {value}", field="priority") from exc
        elif key == "due_date":
            value = parse_due_date(value)
        elif key in ("completed", "archived"):
            value = bool(value)
        columns[column] = value
    return columns


def _to_category_columns(fields: dict) -> dict:
    return {CATEGORY_COLUMNS[key]: value for key, value in fields.items() if key in CATEGORY_COLUMNS}


class _SqlStore:
    kind = "record"

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    async def _run_read(self, fn, *args):
        try:
            return await asyncio.to_thread(fn, *args)
        except (SQLAlchemyError, ValueError) as exc:
            # ValueError: a stored row that does not translate into an entity.
            logger.exception("Failed to read %s records", self.kind)
            raise LoadError(f"Failed to fetch {self.kind} records") from exc

    async def _run_write(self, fn, *args):
        try:
            return await asyncio.to_thread(fn, *args)
        except (SQLAlchemyError, ValueError) as exc:
            logger.exception("Failed to write %s record", self.kind)
            raise MutationError(f"Failed to save {self.kind}") from exc


class SqlTaskStore(_SqlStore):
    kind = "task"

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(session_factory)
        self._clock = clock

    async def get_all(self) -> list[TaskEntity]:
        return await self._run_read(self._get_all)

    async def get_by_id(self, entity_id: int) -> TaskEntity:
        return await self._run_read(self._get_by_id, entity_id)

    async def create(self, fields: dict) -> TaskEntity:
        columns = _to_task_columns(fields)
        return await self._run_write(self._create, columns)

    async def update(self, entity_id: int, fields: dict) -> TaskEntity:
        columns = _to_task_columns(fields)
        return await self._run_write(self._update, entity_id, columns)

    async def delete(self, entity_id: int) -> bool:
        return await self._run_write(self._delete, entity_id)

    def _get_all(self) -> list[TaskEntity]:
        with self._session_factory() as session:
            stmt = select(TaskModel).order_by(TaskModel.created_at.desc(), TaskModel.id.desc())
            return [_to_task_entity(task) for task in session.scalars(stmt)]

    def _get_by_id(self, task_id: int) -> TaskEntity:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                raise NotFoundError(self.kind, task_id)
            return _to_task_entity(task)

    def _create(self, columns: dict) -> TaskEntity:
        with self._session_factory() as session:
            now = self._clock()
            task = TaskModel(created_at=now, updated_at=now, **columns)
            session.add(task)
            session.commit()
            session.refresh(task)
            logger.debug("Created task %s", task.id)
            return _to_task_entity(task)

    def _update(self, task_id: int, columns: dict) -> TaskEntity:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                raise NotFoundError(self.kind, task_id)
            for key, value in columns.items():
                setattr(task, key, value)
            task.updated_at = self._clock()
            session.commit()
            session.refresh(task)
            return _to_task_entity(task)

    def _delete(self, task_id: int) -> bool:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                raise NotFoundError(self.kind, task_id)
            session.delete(task)
            session.commit()
            return True


class SqlCategoryStore(_SqlStore):
    kind = "category"

    async def get_all(self) -> list[CategoryEntity]:
        return await self._run_read(self._get_all)

    async def get_by_id(self, entity_id: int) -> CategoryEntity:
        return await self._run_read(self._get_by_id, entity_id)

    async def create(self, fields: dict) -> CategoryEntity:
        return await self._run_write(self._create, _to_category_columns(fields))

    async def update(self, entity_id: int, fields: dict) -> CategoryEntity:
        return await self._run_write(self._update, entity_id, _to_category_columns(fields))

    async def delete(self, entity_id: int) -> bool:
        return await self._run_write(self._delete, entity_id)

    @staticmethod
    def _counts(session, category_id: int | None = None) -> dict[int, tuple[int, int]]:
        stmt = (
            select(
                TaskModel.category_id,
                func.count(),
                func.sum(case((TaskModel.completed.is_(True), 1), else_=0)),
            )
            .where(TaskModel.archived.is_(False), TaskModel.category_id.is_not(None))
            .group_by(TaskModel.category_id)
        )
        if category_id is not None:
            stmt = stmt.where(TaskModel.category_id == category_id)
        return {
            row_id: (int(total or 0), int(completed or 0))
            for row_id, total, completed in session.execute(stmt)
        }

    def _get_all(self) -> list[CategoryEntity]:
        with self._session_factory() as session:
            counts = self._counts(session)
            stmt = select(CategoryModel).order_by(CategoryModel.id.asc())
            return [
                _to_category_entity(category, counts.get(category.id, (0, 0)))
                for category in session.scalars(stmt)
            ]

    def _get_by_id(self, category_id: int) -> CategoryEntity:
        with self._session_factory() as session:
            category = session.get(CategoryModel, category_id)
            if not category:
                raise NotFoundError(self.kind, category_id)
            counts = self._counts(session, category_id)
            return _to_category_entity(category, counts.get(category_id, (0, 0)))

    def _create(self, columns: dict) -> CategoryEntity:
        with self._session_factory() as session:
            category = CategoryModel(**columns)
            session.add(category)
            session.commit()
            session.refresh(category)
            return _to_category_entity(category)

    def _update(self, category_id: int, columns: dict) -> CategoryEntity:
        with self._session_factory() as session:
            category = session.get(CategoryModel, category_id)
            if not category:
                raise NotFoundError(self.kind, category_id)
            for key, value in columns.items():
                setattr(category, key, value)
            session.commit()
            session.refresh(category)
            counts = self._counts(session, category_id)
            return _to_category_entity(category, counts.get(category_id, (0, 0)))

    def _delete(self, category_id: int) -> bool:
        with self._session_factory() as session:
            category = session.get(CategoryModel, category_id)
            if not category:
                raise NotFoundError(self.kind, category_id)
            session.delete(category)
            session.commit()
            return True
