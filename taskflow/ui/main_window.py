from __future__ import annotations

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QColor, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QButtonGroup,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QSplitter,
    QStackedWidget,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from taskflow.domain.enums import StatusFilter
from taskflow.infra.stores import StoreBundle
from taskflow.services.notifications import Notification
from taskflow.services.view_state import ArchiveViewController, TaskViewController

from .async_runner import QtAsyncRunner
from .dialogs import TaskFormDialog
from .widgets import ArchivedTaskItemWidget, TaskItemWidget, TaskListWidget

STATUS_TABS = [
    ("All", StatusFilter.ALL),
    ("Active", StatusFilter.ACTIVE),
    ("Completed", StatusFilter.COMPLETED),
]

NOTIFICATION_MS = 3000


def _error_panel(on_retry) -> tuple[QWidget, QLabel]:
    frame = QFrame()
    frame.setObjectName("ErrorPanel")
    layout = QVBoxLayout(frame)
    layout.addStretch()
    title = QLabel("Failed to load tasks")
    title.setProperty("class", "panel-title")
    title.setAlignment(Qt.AlignCenter)
    message = QLabel("")
    message.setAlignment(Qt.AlignCenter)
    retry = QPushButton("Try Again")
    retry.clicked.connect(on_retry)
    layout.addWidget(title)
    layout.addWidget(message)
    layout.addWidget(retry, 0, Qt.AlignCenter)
    layout.addStretch()
    return frame, message


class TasksPage(QWidget):
    def __init__(self, controller: TaskViewController, runner: QtAsyncRunner, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.runner = runner

        self.stack = QStackedWidget()
        self.loading_label = QLabel("Loading tasks...")
        self.loading_label.setAlignment(Qt.AlignCenter)
        self.error_panel, self.error_message = _error_panel(self.reload)

        content = QSplitter(Qt.Horizontal)
        content.addWidget(self._build_sidebar())
        content.addWidget(self._build_center())
        content.setStretchFactor(0, 0)
        content.setStretchFactor(1, 1)
        content.setSizes([240, 760])

        self.stack.addWidget(self.loading_label)
        self.stack.addWidget(self.error_panel)
        self.stack.addWidget(content)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.stack)

        controller.subscribe(self.schedule_render)

    def _build_sidebar(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("Sidebar")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        progress_title = QLabel("Today's Progress")
        progress_title.setProperty("class", "sidebar-title")
        self.completed_today_label = QLabel("0")
        self.completed_today_label.setProperty("class", "stats-badge")
        layout.addWidget(progress_title)
        layout.addWidget(self.completed_today_label)

        categories_title = QLabel("Categories")
        categories_title.setProperty("class", "sidebar-title")
        layout.addWidget(categories_title)

        self.category_list = QListWidget()
        self.category_list.setObjectName("FilterList")
        self.category_list.currentItemChanged.connect(self.on_category_change)
        layout.addWidget(self.category_list)

        self.category_totals_label = QLabel("")
        self.category_totals_label.setProperty("class", "stats")
        layout.addWidget(self.category_totals_label)
        return frame

    def _build_center(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("CenterPanel")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        header = QHBoxLayout()
        header_title = QLabel("Your Tasks")
        header_title.setProperty("class", "panel-title")
        add_button = QPushButton("Add Task")
        add_button.clicked.connect(self.new_task)
        header.addWidget(header_title)
        header.addStretch()
        header.addWidget(add_button)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search tasks...")
        self.search_input.textChanged.connect(self.controller.set_search)

        status_row = QHBoxLayout()
        self.status_group = QButtonGroup(self)
        self.status_buttons: dict[StatusFilter, QPushButton] = {}
        for label, status in STATUS_TABS:
            button = QPushButton(label)
            button.setCheckable(True)
            button.setProperty("variant", "secondary")
            button.clicked.connect(lambda _checked, s=status: self.controller.set_status_filter(s))
            self.status_group.addButton(button)
            self.status_buttons[status] = button
            status_row.addWidget(button)
        self.status_buttons[StatusFilter.ALL].setChecked(True)

        self.task_list = TaskListWidget()
        self.task_list.setObjectName("TaskList")

        self.empty_label = QLabel("")
        self.empty_label.setAlignment(Qt.AlignCenter)

        layout.addLayout(header)
        layout.addWidget(self.search_input)
        layout.addLayout(status_row)
        layout.addWidget(self.empty_label)
        layout.addWidget(self.task_list, 1)
        return frame

    def reload(self) -> None:
        self.runner.submit(self.controller.load())

    def schedule_render(self) -> None:
        # Rendering rebuilds row widgets, which may be the sender of the
        # current signal.
        QTimer.singleShot(0, self.render)

    def render(self) -> None:
        controller = self.controller
        if controller.loading and not controller.tasks:
            self.stack.setCurrentWidget(self.loading_label)
            return
        if controller.error:
            self.error_message.setText(controller.error)
            self.stack.setCurrentWidget(self.error_panel)
            return
        self.stack.setCurrentIndex(2)
        self._render_sidebar()
        self._render_tasks()

    def _render_sidebar(self) -> None:
        controller = self.controller
        counters = controller.counters
        self.completed_today_label.setText(f"{counters.completed_today} tasks completed")
        self.category_totals_label.setText(
            f"Active: {counters.category_active} • Completed: {counters.category_completed}"
        )

        counts = controller.category_counts
        selected = controller.filters.category
        self.category_list.blockSignals(True)
        self.category_list.clear()
        all_item = QListWidgetItem("All Categories")
        all_item.setData(Qt.UserRole, None)
        self.category_list.addItem(all_item)
        for category in controller.categories:
            item = QListWidgetItem(f"{category.name} ({counts.get(category.id, 0)})")
            item.setData(Qt.UserRole, category.id)
            item.setForeground(QColor(category.color))
            self.category_list.addItem(item)
            if category.id == selected:
                self.category_list.setCurrentItem(item)
        if selected is None:
            self.category_list.setCurrentItem(all_item)
        self.category_list.blockSignals(False)

    def _render_tasks(self) -> None:
        controller = self.controller
        status_counts = controller.status_counts
        for label, status in STATUS_TABS:
            button = self.status_buttons[status]
            button.setText(f"{label} ({status_counts[status]})")
            button.setChecked(status == controller.filters.status)

        tasks = controller.visible_tasks
        self.task_list.clear()
        for task in tasks:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            widget = TaskItemWidget(
                task,
                controller.category_by_id(task.category),
                controller.is_overdue(task),
                editing=controller.editing_task_id == task.id,
                draft_title=controller.edit_draft_title,
                on_toggle=lambda task_id: self.runner.submit(controller.toggle_complete(task_id)),
                on_start_edit=controller.start_edit,
                on_draft_change=controller.set_edit_draft,
                on_save_edit=lambda: self.runner.submit(controller.save_edit()),
                on_cancel_edit=controller.cancel_edit,
                on_archive=lambda task_id: self.runner.submit(controller.archive_task(task_id)),
                on_delete=lambda task_id: self.runner.submit(controller.delete_task(task_id)),
            )
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
        self.task_list.sync_item_sizes()

        if tasks:
            self.empty_label.hide()
        else:
            self.empty_label.setText(
                "No matching tasks" if controller.filters.search else "No tasks yet"
            )
            self.empty_label.show()

    def on_category_change(self, current: QListWidgetItem) -> None:
        if not current:
            return
        self.controller.select_category(current.data(Qt.UserRole))

    def new_task(self) -> None:
        self.controller.open_form()
        dialog = TaskFormDialog(
            self.controller.categories,
            self,
            submit=lambda draft: self.runner.submit(self.controller.create_task(draft)),
        )
        if not dialog.exec():
            self.controller.close_form()


class ArchivePage(QWidget):
    def __init__(self, controller: ArchiveViewController, runner: QtAsyncRunner, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.runner = runner

        self.stack = QStackedWidget()
        self.loading_label = QLabel("Loading archive...")
        self.loading_label.setAlignment(Qt.AlignCenter)
        self.error_panel, self.error_message = _error_panel(self.reload)

        content = QFrame()
        content.setObjectName("CenterPanel")
        content_layout = QVBoxLayout(content)
        content_layout.setContentsMargins(12, 12, 12, 12)

        title = QLabel("Archive")
        title.setProperty("class", "panel-title")
        subtitle = QLabel("View and restore archived tasks")
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search archived tasks...")
        self.search_input.textChanged.connect(controller.set_search)
        self.empty_label = QLabel("")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.task_list = TaskListWidget()

        content_layout.addWidget(title)
        content_layout.addWidget(subtitle)
        content_layout.addWidget(self.search_input)
        content_layout.addWidget(self.empty_label)
        content_layout.addWidget(self.task_list, 1)

        self.stack.addWidget(self.loading_label)
        self.stack.addWidget(self.error_panel)
        self.stack.addWidget(content)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.stack)

        controller.subscribe(self.schedule_render)

    def reload(self) -> None:
        self.runner.submit(self.controller.load())

    def schedule_render(self) -> None:
        # Rendering rebuilds row widgets, which may be the sender of the
        # current signal.
        QTimer.singleShot(0, self.render)

    def render(self) -> None:
        controller = self.controller
        if controller.loading:
            self.stack.setCurrentWidget(self.loading_label)
            return
        if controller.error:
            self.error_message.setText(controller.error)
            self.stack.setCurrentWidget(self.error_panel)
            return
        self.stack.setCurrentIndex(2)

        tasks = controller.visible_tasks
        self.task_list.clear()
        for task in tasks:
            item = QListWidgetItem()
            widget = ArchivedTaskItemWidget(
                task,
                controller.category_by_id(task.category),
                on_restore=lambda task_id: self.runner.submit(controller.restore_task(task_id)),
                on_delete=self.confirm_delete,
            )
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
        self.task_list.sync_item_sizes()

        if tasks:
            self.empty_label.hide()
        else:
            self.empty_label.setText(
                "No matching archived tasks" if controller.search else "No archived tasks"
            )
            self.empty_label.show()

    def confirm_delete(self, task_id: int) -> None:
        answer = QMessageBox.question(
            self,
            "Delete task",
            "Are you sure you want to permanently delete this task?",
        )
        if answer == QMessageBox.Yes:
            self.runner.submit(self.controller.delete_task(task_id))


class MainWindow(QWidget):
    def __init__(self, stores: StoreBundle):
        super().__init__()
        self.setWindowTitle("Taskflow")
        self.resize(1100, 720)

        self.runner = QtAsyncRunner(self)
        self.tasks_controller = TaskViewController(
            stores.tasks, stores.categories, notify=self.show_notification
        )
        self.archive_controller = ArchiveViewController(
            stores.tasks, stores.categories, notify=self.show_notification
        )

        self.tasks_page = TasksPage(self.tasks_controller, self.runner)
        self.archive_page = ArchivePage(self.archive_controller, self.runner)

        self.tabs = QTabWidget()
        self.tabs.addTab(self.tasks_page, "Tasks")
        self.tabs.addTab(self.archive_page, "Archive")
        self.tabs.currentChanged.connect(self.on_tab_change)

        self.notification_label = QLabel("")
        self.notification_label.setObjectName("Toast")
        self.notification_label.hide()
        self._notification_timer = QTimer(self)
        self._notification_timer.setSingleShot(True)
        self._notification_timer.timeout.connect(self.notification_label.hide)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.addWidget(self.tabs, 1)
        layout.addWidget(self.notification_label)

        QShortcut(QKeySequence("Ctrl+N"), self, self.tasks_page.new_task)
        QShortcut(QKeySequence("Escape"), self, self.tasks_controller.cancel_edit)

        self.tasks_page.reload()

    def on_tab_change(self, index: int) -> None:
        # Each view loads its own data when it is shown.
        if self.tabs.widget(index) is self.archive_page:
            self.archive_page.reload()
        else:
            self.tasks_page.reload()

    def show_notification(self, notification: Notification) -> None:
        self.notification_label.setProperty("level", notification.level.value)
        self.notification_label.setText(notification.message)
        self.notification_label.style().unpolish(self.notification_label)
        self.notification_label.style().polish(self.notification_label)
        self.notification_label.show()
        self._notification_timer.start(NOTIFICATION_MS)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.runner.close()
        super().closeEvent(event)
