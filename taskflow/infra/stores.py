from __future__ import annotations

import logging
from dataclasses import dataclass

from taskflow.config import Settings
from taskflow.domain.entities import CategoryEntity, TaskEntity
from taskflow.domain.enums import StoreBackend
from taskflow.domain.ports import EntityStore

from .db import init_db, make_engine, make_session_factory
from .memory_store import InMemoryCategoryStore, InMemoryTaskStore
from .repository import SqlCategoryStore, SqlTaskStore
from .seed import SEED_CATEGORIES, SEED_TASKS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreBundle:
    tasks: EntityStore[TaskEntity]
    categories: EntityStore[CategoryEntity]


def build_stores(settings: Settings) -> StoreBundle:
    """Pick the store backend once, at startup."""
    try:
        backend = StoreBackend(settings.store_backend)
    except ValueError as exc:
        raise RuntimeError(f"Unknown STORE_BACKEND: {settings.store_backend!r}") from exc

    if backend == StoreBackend.DATABASE:
        if not settings.database_url:
            raise RuntimeError(
                "DATABASE_URL is not set. Create a .env file with your connection string."
            )
        engine = make_engine(settings.database_url)
        init_db(engine)
        session_factory = make_session_factory(engine)
        logger.info("Using database store at %s", engine.url.render_as_string(hide_password=True))
        return StoreBundle(
            tasks=SqlTaskStore(session_factory),
            categories=SqlCategoryStore(session_factory),
        )

    task_store = InMemoryTaskStore(SEED_TASKS, latency_scale=settings.latency_scale)
    category_store = InMemoryCategoryStore(
        task_store, SEED_CATEGORIES, latency_scale=settings.latency_scale
    )
    logger.info("Using in-memory store with %d seed tasks", len(SEED_TASKS))
    return StoreBundle(tasks=task_store, categories=category_store)
