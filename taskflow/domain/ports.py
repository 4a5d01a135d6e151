"""
Ports used by the view controllers.

Controllers depend on this Protocol rather than on a concrete store, so the
in-memory and database backends are interchangeable and fakes are easy to
write in tests.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

T = TypeVar("T", covariant=True)


class EntityStore(Protocol[T]):
    """Async CRUD over one entity kind.

    ``get_all`` raises ``LoadError``; ``get_by_id``, ``update`` and ``delete``
    raise ``NotFoundError`` for unknown ids; other write failures surface as
    ``MutationError``.
    """

    async def get_all(self) -> list[T]: ...

    async def get_by_id(self, entity_id: int) -> T: ...

    async def create(self, fields: dict[str, Any]) -> T: ...

    async def update(self, entity_id: int, fields: dict[str, Any]) -> T: ...

    async def delete(self, entity_id: int) -> bool: ...
