from __future__ import annotations

import sys

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from taskflow.config import SETTINGS
from taskflow.infra.logging import setup_logging
from taskflow.infra.stores import build_stores
from taskflow.ui.main_window import MainWindow

STYLESHEET = """
QLabel[class="panel-title"] { font-size: 18px; font-weight: 600; }
QLabel[class="sidebar-title"] { font-weight: 600; color: #94A3B8; }
QLabel[class="task-meta"] { color: #94A3B8; }
QLabel[class="task-meta-overdue"] { color: #F87171; }
QLabel[class="task-priority"] { border-radius: 6px; padding: 2px 8px; color: #0F172A; }
QLabel[class="form-error"] { color: #F87171; }
QPushButton[class="task-title-done"] { text-decoration: line-through; color: #64748B; }
#TaskCard { background: #1B2230; border-radius: 8px; }
#Toast { border-radius: 6px; padding: 8px 12px; background: #166534; }
#Toast[level="error"] { background: #991B1B; }
"""


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#0F172A"))
    palette.setColor(QPalette.WindowText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Base, QColor("#111827"))
    palette.setColor(QPalette.AlternateBase, QColor("#1B2230"))
    palette.setColor(QPalette.Text, QColor("#E6EDF3"))
    palette.setColor(QPalette.Button, QColor("#202A3B"))
    palette.setColor(QPalette.ButtonText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Highlight, QColor("#5B21B6"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def main() -> None:
    setup_logging(SETTINGS)
    app = QApplication(sys.argv)
    try:
        stores = build_stores(SETTINGS)
    except Exception as exc:  # noqa: BLE001
        QMessageBox.critical(None, "Store error", str(exc))
        return

    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont("Inter", 10))
    app.setStyleSheet(STYLESHEET)

    window = MainWindow(stores)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
