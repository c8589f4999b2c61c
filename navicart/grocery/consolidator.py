"""Duplicate and component merging over the whole item collection."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable

from .db.base import ItemStore
from .models import Item
from .taxonomy import DEFAULT_TAXONOMY, Taxonomy

logger = logging.getLogger(__name__)


@dataclass
class ConsolidationResult:
    """Outcome of one consolidation pass."""

    items: list[Item] = field(default_factory=list)      # collection after the pass
    updated: list[Item] = field(default_factory=list)    # primaries with summed quantity
    created: list[Item] = field(default_factory=list)    # synthesized component merges
    deleted: set[int] = field(default_factory=set)

    @property
    def merged(self) -> list[Item]:
        """Records the pass writes: updated primaries plus new records."""
        return self.updated + self.created

    @property
    def changed(self) -> bool:
        return bool(self.updated or self.created or self.deleted)


def _sort_key(item: Item) -> tuple:
    # Earliest first; unsaved items (no id) after saved ones of the same time
    return (item.created_at, item.id is None, item.id or 0)


def _total(group: Iterable[Item]) -> int:
    return sum(max(1, item.quantity) for item in group)


def consolidate(
    items: Iterable[Item],
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> ConsolidationResult:
    """Merge exact duplicates, then component fragments of one base ingredient.

    Pass 1 groups items by normalized key; the earliest-created item of each
    group survives with the summed quantity. Pass 2 groups the survivors by
    base ingredient (see ``Taxonomy.base_ingredient``) and replaces each
    group of two or more with one fresh record named after the bare base
    ingredient if present, otherwise the shortest member. Input items are not
    modified. Running this on its own ``items`` output changes nothing.
    """
    ordered = sorted(items, key=_sort_key)
    result = ConsolidationResult()

    # Pass 1: exact duplicates by normalized key
    by_key: dict[str, list[Item]] = {}
    for item in ordered:
        by_key.setdefault(item.normalized_key, []).append(item)

    survivors: list[Item] = []
    updated: dict[int, Item] = {}
    for group in by_key.values():
        primary = replace(group[0])
        if len(group) > 1:
            primary.quantity = _total(group)
            result.deleted.update(i.id for i in group[1:] if i.id is not None)
            if primary.id is not None:
                updated[primary.id] = primary
        survivors.append(primary)

    # Pass 2: component fragments of the same base ingredient
    by_base: dict[str, list[Item]] = {}
    for item in survivors:
        base = taxonomy.base_ingredient(item.normalized_key)
        if base is not None:
            by_base.setdefault(base, []).append(item)

    absorbed: set[int] = set()
    for base in taxonomy.component_relations:
        group = by_base.get(base, [])
        if len(group) < 2:
            continue

        exact = next((i for i in group if i.normalized_key == base), None)
        # min() keeps the first of equally short names
        name_source = exact or min(group, key=lambda i: len(i.text.strip()))
        merged = Item(
            text=name_source.text.strip(),
            category=group[0].category,
            quantity=_total(group),
            completed=all(i.completed for i in group),
            created_at=min(i.created_at for i in group),
        )
        result.created.append(merged)

        for member in group:
            absorbed.add(id(member))
            if member.id is not None:
                result.deleted.add(member.id)
                updated.pop(member.id, None)

    result.updated = list(updated.values())
    result.items = sorted(
        [i for i in survivors if id(i) not in absorbed] + result.created,
        key=_sort_key,
    )
    return result


class Consolidator:
    """Applies consolidation passes to an item store.

    Merged records are written before duplicates are deleted, so a pass that
    fails midway leaves only unmerged leftovers for the next pass. Store
    errors from ``run`` propagate to the caller; nothing is retried here.
    """

    def __init__(
        self,
        store: ItemStore,
        taxonomy: Taxonomy = DEFAULT_TAXONOMY,
        debounce_seconds: float = 1.0,
    ) -> None:
        self._store = store
        self._taxonomy = taxonomy
        self._debounce_seconds = debounce_seconds
        self._timer: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        # One pass at a time; a pass must see the writes of the one before it
        self._lock = asyncio.Lock()

    async def run(self) -> ConsolidationResult:
        """Run one consolidation pass against the store.

        Passes are serialized; a call made while another pass is running
        waits for it and then reads the updated collection.
        """
        async with self._lock:
            return await self._run()

    async def _run(self) -> ConsolidationResult:
        items = await self._store.list()
        result = consolidate(items, self._taxonomy)
        if not result.changed:
            logger.debug("Consolidation found nothing to merge (%d items)", len(items))
            return result

        for item in result.updated:
            await self._store.update(item.id, quantity=item.quantity)
        for item in result.created:
            item.id = await self._store.insert(item)
        for item_id in sorted(result.deleted):
            await self._store.delete(item_id)

        logger.info(
            "Consolidated %d items: %d updated, %d created, %d deleted",
            len(items), len(result.updated), len(result.created), len(result.deleted),
        )
        return result

    def schedule(self) -> None:
        """Run a pass after the debounce delay; a new call restarts the delay.

        Must be called from a running event loop.
        """
        if self._timer is not None:
            self._timer.cancel()
        task = asyncio.get_running_loop().create_task(self._debounced())
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _debounced(self) -> None:
        await asyncio.sleep(self._debounce_seconds)
        # Past the delay the pass is no longer cancelled by schedule()
        self._timer = None
        try:
            await self.run()
        except Exception:
            logger.exception("Debounced consolidation failed")

    async def flush(self) -> None:
        """Wait for any scheduled or running debounced pass to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
