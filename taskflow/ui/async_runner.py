from __future__ import annotations

import asyncio
import logging
from typing import Coroutine

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)


class QtAsyncRunner(QObject):
    """Drives an asyncio loop from the Qt event loop.

    Every tick runs one pass of ready asyncio callbacks, so coroutines and
    their continuations execute on the GUI thread, one reaction at a time.
    """

    def __init__(self, parent: QObject | None = None, interval_ms: int = 10) -> None:
        super().__init__(parent)
        self._loop = asyncio.new_event_loop()
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._pump)
        self._timer.start()

    def _pump(self) -> None:
        self._loop.call_soon(self._loop.stop)
        self._loop.run_forever()

    def submit(self, coro: Coroutine) -> asyncio.Task:
        task = self._loop.create_task(coro)
        task.add_done_callback(self._report)
        return task

    @staticmethod
    def _report(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background task failed", exc_info=exc)

    def close(self) -> None:
        self._timer.stop()
        pending = asyncio.all_tasks(self._loop)
        for task in pending:
            task.cancel()
        if pending:
            self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        self._loop.run_until_complete(self._loop.shutdown_default_executor())
        self._loop.close()
