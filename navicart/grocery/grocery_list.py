"""Grocery list operations on top of the classifier, store, and consolidator."""

from __future__ import annotations

import logging
from typing import Iterable

from .classifier import Classifier
from .consolidator import ConsolidationResult, Consolidator
from .db.base import ItemStore
from .models import Item, Recipe
from .normalizer import clean_preparation_terms, normalize_item_text
from .recipe import shopping_entries

logger = logging.getLogger(__name__)


class GroceryList:
    """Add, toggle, delete, and clean up items of a shared shopping list.

    Adding an item whose normalized text already exists bumps that record's
    quantity instead of inserting. Concurrent adds of the same new text can
    still create two records; the debounced consolidation pass that follows
    every write merges them.
    """

    def __init__(
        self,
        store: ItemStore,
        classifier: Classifier,
        consolidator: Consolidator | None = None,
        auto_consolidate: bool = True,
    ) -> None:
        self._store = store
        self._classifier = classifier
        self._consolidator = consolidator or Consolidator(store, classifier.taxonomy)
        self._auto_consolidate = auto_consolidate

    @property
    def consolidator(self) -> Consolidator:
        return self._consolidator

    async def add_item(self, text: str, quantity: int = 1) -> Item:
        """Classify and add an item, or increase the quantity of its duplicate."""
        return await self._add(text, quantity)

    async def _add(
        self, text: str, quantity: int, classify_text: str | None = None
    ) -> Item:
        text = text.strip()
        if not text:
            raise ValueError("Item text must not be empty")
        quantity = max(1, int(quantity))
        key = normalize_item_text(text)

        existing = next(
            (i for i in await self._store.list() if i.normalized_key == key), None
        )
        if existing is not None:
            existing.quantity += quantity
            await self._store.update(existing.id, quantity=existing.quantity)
            logger.debug("Increased %r to %d", existing.text, existing.quantity)
            item = existing
        else:
            # Only new records are classified; an existing one keeps its category
            category = await self._classifier.classify(classify_text or text)
            item = Item(text=text, category=category, quantity=quantity)
            item.id = await self._store.insert(item)
            logger.debug("Added %r (%s) x%d", text, category, quantity)

        if self._auto_consolidate:
            self._consolidator.schedule()
        return item

    async def add_recipe(
        self,
        recipe: Recipe,
        pantry_terms: Iterable[str] = (),
    ) -> list[Item]:
        """Add the recipe ingredients not already covered by the pantry."""
        added: list[Item] = []
        for ingredient, entry in shopping_entries(recipe, pantry_terms):
            added.append(await self._add(
                entry.text, entry.quantity, clean_preparation_terms(ingredient.name)
            ))
        logger.info(
            "Added %d of %d ingredients from %r",
            len(added), len(recipe.ingredients), recipe.name,
        )
        return added

    async def toggle(self, item_id: int) -> Item:
        """Flip an item's completed flag."""
        item = await self._store.get(item_id)
        if item is None:
            raise ValueError(f"Item {item_id} not found")
        item.completed = not item.completed
        await self._store.update(item_id, completed=item.completed)
        return item

    async def delete(self, item_id: int) -> None:
        await self._store.delete(item_id)

    async def clear(self, completed_only: bool = False) -> int:
        """Delete all items, or only completed ones. Returns the count."""
        targets = [
            i for i in await self._store.list()
            if not completed_only or i.completed
        ]
        for item in targets:
            await self._store.delete(item.id)
        return len(targets)

    async def items(self) -> list[Item]:
        """All items, sorted by category then creation time."""
        return sorted(
            await self._store.list(),
            key=lambda i: (i.category, i.created_at),
        )

    async def grouped(self) -> dict[str, list[Item]]:
        """Items grouped by category, categories in taxonomy order."""
        order = {c: n for n, c in enumerate(self._classifier.taxonomy.categories)}
        groups: dict[str, list[Item]] = {}
        for item in sorted(
            await self._store.list(),
            key=lambda i: (order.get(i.category, len(order)), i.created_at),
        ):
            groups.setdefault(item.category, []).append(item)
        return groups

    async def consolidate(self) -> ConsolidationResult:
        """Run a consolidation pass now. Store errors propagate."""
        return await self._consolidator.run()
