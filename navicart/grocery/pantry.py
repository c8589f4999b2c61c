"""Matching recipe ingredients against what is already in the pantry."""

from __future__ import annotations

from typing import Iterable

from .models import RecipeIngredient


def _singularize(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"  # berries → berry
    if word.endswith("s"):
        return word[:-1]  # apples → apple
    return word


def matches(ingredient_name: str, pantry_term: str) -> bool:
    """Check if an ingredient is covered by a pantry term.

    Uses substring matching in both directions, then repeats it on naive
    singular forms. Errs towards matching: a near-duplicate left off the list
    is cheaper than a needed ingredient left off.
    """
    ing = ingredient_name.lower()
    pantry = pantry_term.lower()

    if pantry in ing or ing in pantry:
        return True

    singular_ing = _singularize(ing)
    singular_pantry = _singularize(pantry)
    return singular_pantry in singular_ing or singular_ing in singular_pantry


def needed_ingredients(
    ingredients: Iterable[RecipeIngredient],
    pantry_terms: Iterable[str],
) -> list[RecipeIngredient]:
    """Return the ingredients not covered by any pantry term."""
    terms = [t.strip() for t in pantry_terms if t.strip()]
    return [
        ing for ing in ingredients
        if not any(matches(ing.name, term) for term in terms)
    ]
