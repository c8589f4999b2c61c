"""Recipe parsing and reduction of ingredients to shopping entries."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable

from .models import Recipe, RecipeIngredient, ShoppingEntry
from .normalizer import normalize_ingredient_for_shopping
from .pantry import needed_ingredients

_FENCED = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)
_OBJECT = re.compile(r"(\{.*\})", re.DOTALL)


def _extract_json(text: str) -> str:
    """Find the recipe JSON object in model output."""
    cleaned = text.strip()
    m = _FENCED.search(cleaned)
    if m:
        return m.group(1)
    m = _OBJECT.search(cleaned)
    if m:
        return m.group(1)
    return cleaned


def parse_recipe(text: str) -> Recipe:
    """Parse a recipe JSON object, tolerating markdown fences and prose.

    Expected shape::

        {"name": "...",
         "ingredients": [{"name": "...", "quantity": "...", "unit": "..."}],
         "instructions": ["...", ...]}

    Raises:
        ValueError: If no valid recipe object can be read.
    """
    try:
        data = json.loads(_extract_json(text))
    except json.JSONDecodeError as e:
        raise ValueError(f"Recipe is not valid JSON: {e}") from e

    if (
        not isinstance(data, dict)
        or not data.get("name")
        or not isinstance(data.get("ingredients"), list)
        or not isinstance(data.get("instructions"), list)
    ):
        raise ValueError("Invalid recipe format: missing required fields")

    ingredients: list[RecipeIngredient] = []
    for raw in data["ingredients"]:
        if isinstance(raw, str):
            raw = {"name": raw}
        if not isinstance(raw, dict):
            continue
        name = str(raw.get("name") or "").strip()
        if not name:
            continue
        ingredients.append(
            RecipeIngredient(
                name=name,
                quantity=str(raw.get("quantity") or "1"),
                unit=str(raw.get("unit") or ""),
            )
        )

    return Recipe(
        name=str(data["name"]),
        ingredients=ingredients,
        instructions=[str(step) for step in data["instructions"]],
    )


def load_recipe(path: str | Path) -> Recipe:
    """Read and parse a recipe file."""
    return parse_recipe(Path(path).read_text(encoding="utf-8"))


def shopping_entries(
    recipe: Recipe,
    pantry_terms: Iterable[str] = (),
) -> list[tuple[RecipeIngredient, ShoppingEntry]]:
    """Pair each ingredient still needed with its shopping-list entry."""
    return [
        (ing, normalize_ingredient_for_shopping(ing))
        for ing in needed_ingredients(recipe.ingredients, pantry_terms)
    ]
