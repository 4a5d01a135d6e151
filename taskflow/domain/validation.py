from __future__ import annotations

from datetime import date, datetime

from .enums import Priority
from .errors import ValidationError


def validate_task_draft(data: dict) -> dict:
    """Check a task form draft and return the normalized fields for ``create``.

    Title and category are required. Priority falls back to medium and the
    due date accepts a ``date``, an ISO string or an empty value.
    """
    title = str(data.get("title") or "").strip()
    if not title:
        raise ValidationError("Title is required", field="title")

    category = data.get("category")
    if category is None or category == "":
        raise ValidationError("Category is required", field="category")

    priority = data.get("priority") or Priority.MEDIUM
    try:
        priority = Priority(priority)
    except ValueError as exc:
        raise ValidationError(f"Unknown priority: {priority}", field="priority") from exc

    normalized = dict(data)
    normalized.update(
        title=title,
        category=category,
        priority=priority,
        due_date=parse_due_date(data.get("due_date")),
    )
    return normalized


def parse_due_date(value: object) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid due date: {value}", field="due_date") from exc
