from __future__ import annotations

import pytest

from taskflow.config import Settings, load_settings
from taskflow.infra.memory_store import InMemoryCategoryStore, InMemoryTaskStore
from taskflow.infra.repository import SqlCategoryStore, SqlTaskStore
from taskflow.infra.stores import build_stores


def test_memory_backend_is_default() -> None:
    bundle = build_stores(Settings(latency_scale=0))

    assert isinstance(bundle.tasks, InMemoryTaskStore)
    assert isinstance(bundle.categories, InMemoryCategoryStore)


async def test_memory_bundle_shares_task_state() -> None:
    bundle = build_stores(Settings(latency_scale=0))

    await bundle.tasks.update(1, {"archived": True})
    work = await bundle.categories.get_by_id(1)

    assert work.task_count == 2


def test_database_backend(tmp_path) -> None:
    settings = Settings(store_backend="database", database_url=f"sqlite:///{tmp_path / 'db.sqlite'}")

    bundle = build_stores(settings)

    assert isinstance(bundle.tasks, SqlTaskStore)
    assert isinstance(bundle.categories, SqlCategoryStore)


def test_database_backend_requires_url() -> None:
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        build_stores(Settings(store_backend="database"))


def test_unknown_backend() -> None:
    with pytest.raises(RuntimeError, match="STORE_BACKEND"):
        build_stores(Settings(store_backend="cloud"))


def test_load_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("STORE_BACKEND", " Database ")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///x.db")
    monkeypatch.setenv("SIMULATED_LATENCY_SCALE", "0")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = load_settings()

    assert settings.store_backend == "database"
    assert settings.database_url == "sqlite:///x.db"
    assert settings.latency_scale == 0
    assert settings.log_level == "DEBUG"


def test_blank_database_url_is_none(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "   ")

    assert load_settings().database_url is None
