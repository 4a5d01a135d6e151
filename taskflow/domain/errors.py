from __future__ import annotations


class StoreError(Exception):
    """Base class for every failure reported by an entity store."""


class LoadError(StoreError):
    pass


class MutationError(StoreError):
    pass


class NotFoundError(MutationError):
    def __init__(self, kind: str, entity_id: object) -> None:
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class ValidationError(MutationError):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
