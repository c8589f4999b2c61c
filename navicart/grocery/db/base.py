"""Item store interface shared by the SQLite and in-memory stores."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from ..models import Item

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A read or write against the item store failed."""


@dataclass(frozen=True)
class ItemChange:
    kind: str  # "insert" | "update" | "delete"
    item_id: int


ChangeListener = Callable[[ItemChange], None]

# Columns callers may change through update()
UPDATABLE_FIELDS = frozenset({"text", "category", "quantity", "completed"})


class ItemStore(ABC):
    """Abstract shared collection of grocery items.

    The engine only calls these operations; persistence and transport are up
    to the implementation. Subscribers are notified after every change.
    """

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    @abstractmethod
    async def list(self) -> list[Item]:
        """Return every item in the collection."""
        ...

    @abstractmethod
    async def insert(self, item: Item) -> int:
        """Insert an item and return its new id."""
        ...

    @abstractmethod
    async def update(self, item_id: int, **fields) -> None:
        """Change some fields of an item.

        Raises:
            StoreError: If the item does not exist or the write fails.
            ValueError: If a field is not updatable.
        """
        ...

    @abstractmethod
    async def delete(self, item_id: int) -> None:
        """Delete an item by id. Deleting a missing id is not an error."""
        ...

    async def get(self, item_id: int) -> Item | None:
        for item in await self.list():
            if item.id == item_id:
                return item
        return None

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: str, item_id: int) -> None:
        change = ItemChange(kind=kind, item_id=item_id)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Item change listener failed for %s", change)


def check_fields(fields: dict) -> None:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update item fields: {', '.join(sorted(unknown))}")
    if "quantity" in fields and int(fields["quantity"]) < 1:
        raise ValueError("quantity must be at least 1")
    if "text" in fields and not str(fields["text"]).strip():
        raise ValueError("text must not be empty")
