"""Tests for recipe parsing."""

import json

import pytest

from navicart.grocery.models import RecipeIngredient, ShoppingEntry
from navicart.grocery.recipe import load_recipe, parse_recipe, shopping_entries

RECIPE = {
    "name": "Pancakes",
    "ingredients": [
        {"name": "flour", "quantity": "2", "unit": "cups"},
        {"name": "eggs", "quantity": "2"},
        {"name": "bananas", "quantity": "3", "unit": ""},
    ],
    "instructions": ["Mix.", "Fry."],
}


class TestParseRecipe:
    def test_plain_json(self):
        recipe = parse_recipe(json.dumps(RECIPE))
        assert recipe.name == "Pancakes"
        assert len(recipe.ingredients) == 3
        assert recipe.ingredients[1] == RecipeIngredient(name="eggs", quantity="2", unit="")
        assert recipe.instructions == ["Mix.", "Fry."]

    def test_markdown_fences(self):
        text = f"Here you go:\n```json\n{json.dumps(RECIPE)}\n```\nEnjoy!"
        assert parse_recipe(text).name == "Pancakes"

    def test_surrounding_prose(self):
        text = f"Sure! {json.dumps(RECIPE)} Let me know."
        assert parse_recipe(text).name == "Pancakes"

    def test_string_ingredients_and_defaults(self):
        recipe = parse_recipe(json.dumps({
            "name": "Toast",
            "ingredients": ["bread", {"name": "butter"}, {"name": ""}],
            "instructions": [],
        }))
        assert recipe.ingredients == [
            RecipeIngredient(name="bread", quantity="1", unit=""),
            RecipeIngredient(name="butter", quantity="1", unit=""),
        ]

    def test_not_json(self):
        with pytest.raises(ValueError, match="not valid JSON"):
            parse_recipe("no recipe here")

    def test_missing_fields(self):
        with pytest.raises(ValueError, match="missing required fields"):
            parse_recipe(json.dumps({"name": "Soup", "ingredients": []}))


def test_load_recipe(tmp_path):
    path = tmp_path / "recipe.json"
    path.write_text(json.dumps(RECIPE), encoding="utf-8")
    assert load_recipe(path).name == "Pancakes"


def test_shopping_entries_skips_pantry():
    recipe = parse_recipe(json.dumps(RECIPE))
    entries = shopping_entries(recipe, pantry_terms=["flour"])

    assert [entry for _, entry in entries] == [
        ShoppingEntry(text="Eggs", quantity=1),
        ShoppingEntry(text="Bananas", quantity=3),
    ]
    assert entries[0][0].name == "eggs"
