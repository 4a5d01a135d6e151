from __future__ import annotations

from enum import StrEnum


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StatusFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class StoreBackend(StrEnum):
    MEMORY = "memory"
    DATABASE = "database"


class NotificationLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
