from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from taskflow.domain.entities import CategoryEntity, TaskEntity
from taskflow.domain.enums import NotificationLevel, StatusFilter
from taskflow.domain.errors import StoreError, ValidationError
from taskflow.domain.filters import TaskFilters, filter_archived, filter_tasks, is_overdue
from taskflow.domain.ports import EntityStore
from taskflow.domain.stats import TaskCounters, category_task_counts, compute_counters, status_counts
from taskflow.domain.validation import validate_task_draft

from .notifications import Notification, Notifier, discard

logger = logging.getLogger(__name__)


class _ViewController:
    load_failure_message = "Failed to load tasks"

    def __init__(
        self,
        task_store: EntityStore[TaskEntity],
        category_store: EntityStore[CategoryEntity],
        notify: Notifier | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._task_store = task_store
        self._category_store = category_store
        self._notify = notify or discard
        self._clock = clock
        self._listeners: list[Callable[[], None]] = []

        self.tasks: list[TaskEntity] = []
        self.categories: list[CategoryEntity] = []
        self.loading = False
        self.error: str | None = None

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _success(self, message: str) -> None:
        self._notify(Notification(NotificationLevel.SUCCESS, message))

    def _failure(self, message: str) -> None:
        self._notify(Notification(NotificationLevel.ERROR, message))

    def _keep_loaded_tasks(self, tasks: list[TaskEntity]) -> list[TaskEntity]:
        return tasks

    async def load(self) -> None:
        """Fetch tasks and categories together; either both land or neither."""
        self.loading = True
        self.error = None
        self._changed()
        try:
            tasks, categories = await asyncio.gather(
                self._task_store.get_all(),
                self._category_store.get_all(),
            )
        except StoreError as exc:
            logger.warning("Load failed: %s", exc)
            self.error = str(exc) or "Failed to load data"
            self._failure(self.load_failure_message)
        else:
            self.tasks = self._keep_loaded_tasks(list(tasks))
            self.categories = list(categories)
        finally:
            self.loading = False
            self._changed()

    def find_task(self, task_id: int) -> TaskEntity | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    def category_by_id(self, category_id: int | None) -> CategoryEntity | None:
        if category_id is None:
            return None
        return next((c for c in self.categories if c.id == category_id), None)

    def is_overdue(self, task: TaskEntity) -> bool:
        return is_overdue(task, self._clock())

    def _replace_task(self, updated: TaskEntity) -> None:
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]

    def _remove_task(self, task_id: int) -> None:
        self.tasks = [task for task in self.tasks if task.id != task_id]


class TaskViewController(_ViewController):
    """State behind the main task view.

    Holds the loaded tasks and categories, the filter selection and the
    inline edit state, and turns user intents into store calls. Store
    failures never escape an intent: they are logged and reported through
    ``notify`` while the existing state stays as it was.
    """

    def __init__(
        self,
        task_store: EntityStore[TaskEntity],
        category_store: EntityStore[CategoryEntity],
        notify: Notifier | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(task_store, category_store, notify=notify, clock=clock)
        self.filters = TaskFilters()
        self.editing_task_id: int | None = None
        self.edit_draft_title = ""
        self.form_open = False

    # filters

    def set_search(self, query: str) -> None:
        self.filters = replace(self.filters, search=query)
        self._changed()

    def select_category(self, category_id: int | None) -> None:
        self.filters = replace(self.filters, category=category_id)
        self._changed()

    def set_status_filter(self, status: StatusFilter | str) -> None:
        self.filters = replace(self.filters, status=StatusFilter(status))
        self._changed()

    @property
    def visible_tasks(self) -> list[TaskEntity]:
        return filter_tasks(self.tasks, self.filters)

    @property
    def counters(self) -> TaskCounters:
        return compute_counters(self.tasks, self.categories, today=self._clock().date())

    @property
    def status_counts(self) -> dict[StatusFilter, int]:
        return status_counts(self.tasks, self.filters)

    @property
    def category_counts(self) -> dict[int, int]:
        return category_task_counts(self.categories)

    # creation form

    def open_form(self) -> None:
        self.form_open = True
        self._changed()

    def close_form(self) -> None:
        self.form_open = False
        self._changed()

    # intents

    async def create_task(self, draft: dict) -> TaskEntity | None:
        try:
            fields = validate_task_draft(draft)
        except ValidationError as exc:
            logger.info("Rejected task draft: %s", exc)
            self._failure(str(exc))
            return None

        try:
            task = await self._task_store.create(fields)
        except StoreError:
            logger.warning("Failed to create task", exc_info=True)
            self._failure("Failed to create task")
            return None

        self.tasks = [task, *self.tasks]
        self.form_open = False
        self._success("Task created successfully")
        self._changed()
        return task

    async def update_task(self, task_id: int, fields: dict) -> TaskEntity | None:
        try:
            updated = await self._task_store.update(task_id, fields)
        except StoreError:
            logger.warning("Failed to update task %s", task_id, exc_info=True)
            self._failure("Failed to update task")
            return None

        self._replace_task(updated)
        if "completed" in fields:
            self._success("Task completed!" if fields["completed"] else "Task reopened")
        elif fields.get("archived"):
            self._success("Task archived")
        else:
            self._success("Task updated")
        self._changed()
        return updated

    async def toggle_complete(self, task_id: int) -> TaskEntity | None:
        task = self.find_task(task_id)
        if task is None:
            logger.warning("Toggle requested for unknown task %s", task_id)
            self._failure("Failed to update task")
            return None
        return await self.update_task(task_id, {"completed": not task.completed})

    async def archive_task(self, task_id: int) -> TaskEntity | None:
        return await self.update_task(task_id, {"archived": True})

    async def delete_task(self, task_id: int) -> bool:
        try:
            await self._task_store.delete(task_id)
        except StoreError:
            logger.warning("Failed to delete task %s", task_id, exc_info=True)
            self._failure("Failed to delete task")
            return False

        self._remove_task(task_id)
        if self.editing_task_id == task_id:
            self.cancel_edit()
        self._success("Task deleted")
        self._changed()
        return True

    # inline edit

    def start_edit(self, task: TaskEntity) -> None:
        # Switching to another task drops the previous draft.
        self.editing_task_id = task.id
        self.edit_draft_title = task.title
        self._changed()

    def set_edit_draft(self, title: str) -> None:
        self.edit_draft_title = title

    async def save_edit(self) -> None:
        """Commit the draft title of the task being edited.

        Edit state goes back to idle before the update is awaited, so the row
        leaves edit mode while the store call is in flight and a failed save
        does not reopen the editor. A blank draft leaves everything untouched.
        """
        title = self.edit_draft_title.strip()
        if self.editing_task_id is None or not title:
            return
        task_id = self.editing_task_id
        self.cancel_edit()
        await self.update_task(task_id, {"title": title})

    def cancel_edit(self) -> None:
        self.editing_task_id = None
        self.edit_draft_title = ""
        self._changed()


class ArchiveViewController(_ViewController):
    """State behind the archive view: search, restore and permanent delete."""

    load_failure_message = "Failed to load archived tasks"

    def __init__(
        self,
        task_store: EntityStore[TaskEntity],
        category_store: EntityStore[CategoryEntity],
        notify: Notifier | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(task_store, category_store, notify=notify, clock=clock)
        self.search = ""

    def _keep_loaded_tasks(self, tasks: list[TaskEntity]) -> list[TaskEntity]:
        return filter_archived(tasks)

    def set_search(self, query: str) -> None:
        self.search = query
        self._changed()

    @property
    def visible_tasks(self) -> list[TaskEntity]:
        return filter_archived(self.tasks, self.search)

    async def restore_task(self, task_id: int) -> bool:
        try:
            await self._task_store.update(task_id, {"archived": False})
        except StoreError:
            logger.warning("Failed to restore task %s", task_id, exc_info=True)
            self._failure("Failed to restore task")
            return False

        self._remove_task(task_id)
        self._success("Task restored successfully")
        self._changed()
        return True

    async def delete_task(self, task_id: int) -> bool:
        try:
            await self._task_store.delete(task_id)
        except StoreError:
            logger.warning("Failed to delete task %s", task_id, exc_info=True)
            self._failure("Failed to delete task")
            return False

        self._remove_task(task_id)
        self._success("Task permanently deleted")
        self._changed()
        return True
