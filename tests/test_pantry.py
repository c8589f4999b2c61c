"""Tests for pantry matching."""

from navicart.grocery.models import RecipeIngredient
from navicart.grocery.pantry import matches, needed_ingredients


def test_matches_plural():
    assert matches("apples", "apple")
    assert matches("apple", "apples")


def test_matches_ies_plural():
    assert matches("berries", "berry")


def test_matches_substring_either_way():
    assert matches("Chicken breast", "chicken")
    assert matches("salt", "kosher salt")


def test_no_match():
    assert not matches("flour", "sugar")


def test_needed_ingredients_filters_pantry():
    ingredients = [
        RecipeIngredient(name="Olive oil", quantity="2", unit="tbsp"),
        RecipeIngredient(name="Tomatoes", quantity="3"),
        RecipeIngredient(name="Basil"),
    ]
    needed = needed_ingredients(ingredients, ["olive oil", "tomato"])
    assert [i.name for i in needed] == ["Basil"]


def test_blank_pantry_terms_ignored():
    ingredients = [RecipeIngredient(name="Basil")]
    assert needed_ingredients(ingredients, ["", "  "]) == ingredients
