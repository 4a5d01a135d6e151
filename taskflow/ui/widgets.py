from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from taskflow.domain.entities import CategoryEntity, TaskEntity
from taskflow.domain.enums import Priority

PRIORITY_OPTIONS = [
    ("Low", Priority.LOW),
    ("Medium", Priority.MEDIUM),
    ("High", Priority.HIGH),
]

PRIORITY_COLORS = {
    Priority.LOW: "#3B82F6",
    Priority.MEDIUM: "#F59E0B",
    Priority.HIGH: "#EF4444",
}


def _priority_badge(priority: Priority) -> QLabel:
    label = next((text for text, value in PRIORITY_OPTIONS if value == priority), "Unknown")
    badge = QLabel(label)
    badge.setProperty("class", "task-priority")
    badge.setStyleSheet(f"background-color: {PRIORITY_COLORS.get(priority, '#9CA3AF')};")
    badge.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
    return badge


def _meta_text(task: TaskEntity, category: CategoryEntity | None, overdue: bool) -> str:
    parts = []
    if category:
        parts.append(category.name)
    if task.due_date:
        due = f"Due {task.due_date.strftime('%b %d, %Y')}"
        parts.append(f"{due} (overdue)" if overdue else due)
    return " | ".join(parts)


class TaskItemWidget(QWidget):
    """One row of the task list, with the inline title editor when editing."""

    def __init__(
        self,
        task: TaskEntity,
        category: CategoryEntity | None,
        overdue: bool,
        editing: bool,
        draft_title: str,
        on_toggle: Callable[[int], None],
        on_start_edit: Callable[[TaskEntity], None],
        on_draft_change: Callable[[str], None],
        on_save_edit: Callable[[], None],
        on_cancel_edit: Callable[[], None],
        on_archive: Callable[[int], None],
        on_delete: Callable[[int], None],
        parent=None,
    ):
        super().__init__(parent)
        self.task = task

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setMinimumHeight(56)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(8)

        self.checkbox = QCheckBox()
        self.checkbox.setChecked(task.completed)
        self.checkbox.clicked.connect(lambda _checked: on_toggle(task.id))
        layout.addWidget(self.checkbox, 0, Qt.AlignTop)

        body = QVBoxLayout()
        body.setSpacing(4)

        if editing:
            row = QHBoxLayout()
            self.title_edit = QLineEdit(draft_title)
            self.title_edit.textChanged.connect(on_draft_change)
            self.title_edit.returnPressed.connect(on_save_edit)
            save = QPushButton("Save")
            save.clicked.connect(on_save_edit)
            cancel = QPushButton("Cancel")
            cancel.setProperty("variant", "ghost")
            cancel.clicked.connect(on_cancel_edit)
            row.addWidget(self.title_edit, 1)
            row.addWidget(save)
            row.addWidget(cancel)
            body.addLayout(row)
            self.title_edit.setFocus()
        else:
            title = QPushButton(task.title)
            title.setFlat(True)
            title.setProperty("class", "task-title-done" if task.completed else "task-title")
            title.setToolTip("Click to edit")
            title.clicked.connect(lambda: on_start_edit(task))
            body.addWidget(title, 0, Qt.AlignLeft)

        meta_text = _meta_text(task, category, overdue)
        if meta_text:
            meta = QLabel(meta_text)
            meta.setProperty("class", "task-meta-overdue" if overdue else "task-meta")
            meta.setWordWrap(True)
            body.addWidget(meta)

        layout.addLayout(body, 1)
        layout.addWidget(_priority_badge(task.priority), 0, Qt.AlignTop)

        archive = QPushButton("Archive")
        archive.setProperty("variant", "secondary")
        archive.clicked.connect(lambda: on_archive(task.id))
        delete = QPushButton("Delete")
        delete.setProperty("variant", "ghost")
        delete.clicked.connect(lambda: on_delete(task.id))
        layout.addWidget(archive, 0, Qt.AlignTop)
        layout.addWidget(delete, 0, Qt.AlignTop)


class ArchivedTaskItemWidget(QWidget):
    def __init__(
        self,
        task: TaskEntity,
        category: CategoryEntity | None,
        on_restore: Callable[[int], None],
        on_delete: Callable[[int], None],
        parent=None,
    ):
        super().__init__(parent)
        self.task = task

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)

        body = QVBoxLayout()
        title = QLabel(task.title)
        title.setProperty("class", "task-title")
        title.setWordWrap(True)
        body.addWidget(title)

        parts = []
        if category:
            parts.append(category.name)
        if task.completed:
            parts.append("Completed")
        parts.append(f"Archived {task.updated_at.strftime('%b %d, %Y')}")
        meta = QLabel(" | ".join(parts))
        meta.setProperty("class", "task-meta")
        body.addWidget(meta)

        layout.addLayout(body, 1)
        layout.addWidget(_priority_badge(task.priority), 0, Qt.AlignTop)

        restore = QPushButton("Restore")
        restore.clicked.connect(lambda: on_restore(task.id))
        delete = QPushButton("Delete permanently")
        delete.setProperty("variant", "ghost")
        delete.clicked.connect(lambda: on_delete(task.id))
        layout.addWidget(restore, 0, Qt.AlignTop)
        layout.addWidget(delete, 0, Qt.AlignTop)


class TaskListWidget(QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setSelectionMode(QListWidget.NoSelection)
        self.setVerticalScrollMode(QListWidget.ScrollPerPixel)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setSpacing(6)

    def sync_item_sizes(self) -> None:
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                item.setSizeHint(widget.sizeHint())
