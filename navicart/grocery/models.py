"""Data models for grocery list items and recipe ingredients."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class Item:
    """A single record of the shopping collection."""

    text: str              # Display text, as entered or derived from a recipe
    category: str          # Taxonomy category (Produce, Dairy, ...)
    quantity: int = 1      # Count of the item, not a physical unit
    completed: bool = False
    created_at: float = field(default_factory=time.time)
    id: int | None = None

    @property
    def normalized_key(self) -> str:
        """Dedup identity: lower-cased, trimmed text."""
        return self.text.strip().lower()


@dataclass
class RecipeIngredient:
    """One ingredient line of a recipe, as the recipe states it."""

    name: str
    quantity: str = "1"
    unit: str = ""


@dataclass
class Recipe:
    name: str
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)


@dataclass
class ShoppingEntry:
    """An ingredient reduced to what goes on the shopping list."""

    text: str
    quantity: int = 1
