"""In-process item store."""

from __future__ import annotations

from dataclasses import replace

from ..models import Item
from .base import ItemStore, StoreError, check_fields


class MemoryItemStore(ItemStore):
    """Keeps items in a dict; ids are assigned sequentially from 1."""

    def __init__(self, items: list[Item] | None = None) -> None:
        super().__init__()
        self._items: dict[int, Item] = {}
        self._next_id = 1
        for item in items or []:
            self._put(item)

    def _put(self, item: Item) -> int:
        item_id = self._next_id
        self._next_id += 1
        self._items[item_id] = replace(item, id=item_id)
        return item_id

    async def list(self) -> list[Item]:
        return [replace(item) for item in self._items.values()]

    async def insert(self, item: Item) -> int:
        item_id = self._put(item)
        self._notify("insert", item_id)
        return item_id

    async def update(self, item_id: int, **fields) -> None:
        check_fields(fields)
        if item_id not in self._items:
            raise StoreError(f"Item {item_id} does not exist")
        self._items[item_id] = replace(self._items[item_id], **fields)
        self._notify("update", item_id)

    async def delete(self, item_id: int) -> None:
        if self._items.pop(item_id, None) is not None:
            self._notify("delete", item_id)
