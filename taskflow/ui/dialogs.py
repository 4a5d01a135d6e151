from __future__ import annotations

import asyncio
from datetime import date
from typing import Callable

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from taskflow.domain.entities import CategoryEntity
from taskflow.domain.enums import Priority
from taskflow.domain.errors import ValidationError
from taskflow.domain.validation import validate_task_draft

from .widgets import PRIORITY_OPTIONS


class TaskFormDialog(QDialog):
    """Creation form.

    With a ``submit`` callback the dialog stays open while the create call is
    in flight and only accepts once a task comes back; a failed create keeps
    the form and its input on screen. ``draft()`` holds the submitted fields.
    """

    def __init__(
        self,
        categories: list[CategoryEntity],
        parent=None,
        submit: Callable[[dict], asyncio.Task] | None = None,
    ):
        super().__init__(parent)
        self._submit_draft = submit
        self.setWindowTitle("Create New Task")
        self.setObjectName("TaskFormDialog")
        self.setMinimumWidth(380)
        self._draft: dict | None = None

        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("What needs to be done?")

        self.category_combo = QComboBox()
        for category in categories:
            self.category_combo.addItem(category.name, category.id)

        self.priority_combo = QComboBox()
        for label, value in PRIORITY_OPTIONS:
            self.priority_combo.addItem(label, value.value)
        self.priority_combo.setCurrentIndex(self.priority_combo.findData(Priority.MEDIUM.value))

        self.due_toggle = QCheckBox("Has due date")
        self.due_input = QDateEdit()
        self.due_input.setCalendarPopup(True)
        self.due_input.setDisplayFormat("dd.MM.yyyy")
        today = date.today()
        self.due_input.setDate(QDate(today.year, today.month, today.day))
        self.due_input.setEnabled(False)
        self.due_toggle.toggled.connect(self.due_input.setEnabled)

        self.error_label = QLabel("")
        self.error_label.setProperty("class", "form-error")

        form = QFormLayout()
        form.addRow("Task Title", self.title_input)
        form.addRow("Category", self.category_combo)
        form.addRow("Priority", self.priority_combo)
        due_row = QHBoxLayout()
        due_row.addWidget(self.due_toggle)
        due_row.addWidget(self.due_input, 1)
        form.addRow("Due Date", due_row)

        self.create_button = QPushButton("Create Task")
        self.create_button.clicked.connect(self._submit)
        cancel_button = QPushButton("Cancel")
        cancel_button.setProperty("variant", "ghost")
        cancel_button.clicked.connect(self.reject)

        buttons = QHBoxLayout()
        buttons.addStretch()
        buttons.addWidget(cancel_button)
        buttons.addWidget(self.create_button)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(self.error_label)
        layout.addLayout(buttons)

    def _collect(self) -> dict:
        return {
            "title": self.title_input.text(),
            "category": self.category_combo.currentData(),
            "priority": self.priority_combo.currentData(),
            "due_date": self.due_input.date().toPython() if self.due_toggle.isChecked() else None,
        }

    def _submit(self) -> None:
        data = self._collect()
        try:
            validate_task_draft(data)
        except ValidationError as exc:
            self.error_label.setText(str(exc))
            return
        self._draft = data
        if self._submit_draft is None:
            self.accept()
            return
        self.error_label.setText("")
        self.create_button.setEnabled(False)
        self._submit_draft(data).add_done_callback(self._on_created)

    def _on_created(self, pending: asyncio.Task) -> None:
        if not pending.cancelled() and pending.exception() is None and pending.result() is not None:
            self.accept()
            return
        self.create_button.setEnabled(True)
        self.error_label.setText("Failed to create task")

    def draft(self) -> dict | None:
        return self._draft
