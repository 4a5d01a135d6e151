from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy import select

from taskflow.domain.enums import NotificationLevel, Priority
from taskflow.domain.errors import LoadError, NotFoundError, ValidationError
from taskflow.infra.db import Base, make_engine, make_session_factory
from taskflow.infra.models import TaskModel
from taskflow.infra.repository import SqlCategoryStore, SqlTaskStore
from taskflow.services.notifications import Notification
from taskflow.services.view_state import TaskViewController


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 3, 10, 9, 0)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'tasks.db'}")
    Base.metadata.create_all(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def tasks(session_factory, clock) -> SqlTaskStore:
    return SqlTaskStore(session_factory, clock=clock)


@pytest.fixture()
def categories(session_factory) -> SqlCategoryStore:
    return SqlCategoryStore(session_factory)


async def test_create_coerces_category_and_maps_columns(tasks, categories, session_factory) -> None:
    work = await categories.create({"name": "Work", "color": "#5B21B6"})

    created = await tasks.create({
        "title": "Draft plan",
        "category": str(work.id),
        "priority": "low",
        "due_date": "2026-04-02",
    })

    assert created.category == work.id
    assert created.priority == Priority.LOW
    assert created.due_date == date(2026, 4, 2)
    with session_factory() as session:
        row = session.scalars(select(TaskModel)).one()
        assert row.category_id == work.id
        assert row.priority == "low"


async def test_create_rejects_non_numeric_category(tasks) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await tasks.create({"title": "Bad", "category": "work"})

    assert excinfo.value.field == "category"


async def test_round_trip_and_update(tasks, clock) -> None:
    created = await tasks.create({"title": "Read book", "category": None})
    assert await tasks.get_by_id(created.id) == created

    clock.now = datetime(2026, 3, 12, 18, 0)
    updated = await tasks.update(created.id, {"completed": True})

    assert updated.completed is True
    assert updated.title == "Read book"
    assert updated.created_at == created.created_at
    assert updated.updated_at == clock.now


async def test_update_without_changes_still_refreshes_timestamp(tasks, clock) -> None:
    created = await tasks.create({"title": "Same"})
    clock.now = datetime(2026, 3, 11, 7, 0)

    updated = await tasks.update(created.id, {"title": "Same"})

    assert updated.updated_at == clock.now


async def test_get_all_newest_first(tasks, clock) -> None:
    first = await tasks.create({"title": "First"})
    clock.now = datetime(2026, 3, 11, 9, 0)
    second = await tasks.create({"title": "Second"})

    assert [task.id for task in await tasks.get_all()] == [second.id, first.id]


async def test_missing_records(tasks, categories) -> None:
    with pytest.raises(NotFoundError):
        await tasks.get_by_id(1)
    with pytest.raises(NotFoundError):
        await tasks.update(1, {"title": "x"})
    with pytest.raises(NotFoundError):
        await tasks.delete(1)
    with pytest.raises(NotFoundError):
        await categories.get_by_id(1)


async def test_delete(tasks) -> None:
    created = await tasks.create({"title": "Temp"})

    assert await tasks.delete(created.id) is True
    assert await tasks.get_all() == []


async def test_category_counters_are_aggregated(tasks, categories) -> None:
    home = await categories.create({"name": "Home", "color": "#F59E0B"})
    await tasks.create({"title": "Dishes", "category": home.id})
    await tasks.create({"title": "Laundry", "category": home.id, "completed": True})
    await tasks.create({"title": "Old", "category": home.id, "completed": True, "archived": True})

    loaded = await categories.get_all()

    assert len(loaded) == 1
    assert (loaded[0].task_count, loaded[0].active_tasks, loaded[0].completed_tasks) == (2, 1, 1)
    fetched = await categories.get_by_id(home.id)
    assert fetched == loaded[0]


async def test_category_update_ignores_counter_fields(categories) -> None:
    created = await categories.create({"name": "Gym", "color": "#10B981"})

    updated = await categories.update(created.id, {"color": "#000000", "task_count": 12})

    assert updated.color == "#000000"
    assert updated.task_count == 0


async def test_backend_failure_becomes_load_error(tmp_path) -> None:
    engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    store = SqlTaskStore(make_session_factory(engine))

    with pytest.raises(LoadError):
        await store.get_all()
    engine.dispose()


async def test_deleted_ids_are_not_reused(tasks, categories) -> None:
    task = await tasks.create({"title": "Temp"})
    category = await categories.create({"name": "Temp", "color": "#000000"})
    await tasks.delete(task.id)
    await categories.delete(category.id)

    assert (await tasks.create({"title": "Next"})).id == task.id + 1
    assert (await categories.create({"name": "Next", "color": "#000000"})).id == category.id + 1


def _insert_bad_priority(session_factory, clock) -> None:
    with session_factory() as session:
        session.add(TaskModel(
            title="Legacy",
            priority="urgent",
            created_at=clock.now,
            updated_at=clock.now,
        ))
        session.commit()


async def test_untranslatable_row_becomes_load_error(tasks, session_factory, clock) -> None:
    _insert_bad_priority(session_factory, clock)

    with pytest.raises(LoadError):
        await tasks.get_all()


async def test_controller_reports_untranslatable_row(tasks, categories, session_factory, clock) -> None:
    _insert_bad_priority(session_factory, clock)
    notifications = []
    controller = TaskViewController(tasks, categories, notify=notifications.append, clock=clock)

    await controller.load()

    assert controller.error == "Failed to fetch task records"
    assert controller.tasks == []
    assert controller.loading is False
    assert notifications[-1] == Notification(NotificationLevel.ERROR, "Failed to load tasks")
