from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from taskflow.domain.enums import NotificationLevel


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str

    @property
    def is_error(self) -> bool:
        return self.level == NotificationLevel.ERROR


Notifier = Callable[[Notification], None]


def discard(notification: Notification) -> None:
    pass
