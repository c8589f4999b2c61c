"""Tests for item text normalization and shopping quantities."""

import pytest

from navicart.grocery.models import RecipeIngredient, ShoppingEntry
from navicart.grocery.normalizer import (
    clean_preparation_terms,
    normalize_ingredient_for_shopping,
    normalize_item_text,
    normalize_unit,
    parse_quantity_expression,
)


class TestNormalizeItemText:
    def test_lower_and_trim(self):
        assert normalize_item_text("  Whole Milk \n") == "whole milk"

    def test_empty(self):
        assert normalize_item_text("   ") == ""


class TestCleanPreparationTerms:
    def test_strips_measure_and_preparation(self):
        assert clean_preparation_terms("2 cups finely chopped onion") == "Onion"

    def test_strips_parenthetical(self):
        assert clean_preparation_terms("butter (softened)") == "Butter"

    def test_cuts_after_comma(self):
        assert clean_preparation_terms("red onion, halved") == "Red onion"

    def test_keeps_connectors_inside_name(self):
        assert clean_preparation_terms("salt and pepper to taste") == "Salt and pepper"

    def test_nothing_left_returns_input(self):
        assert clean_preparation_terms("chopped") == "chopped"

    def test_fraction_measure(self):
        assert clean_preparation_terms("1 1/2 tbsp. of olive oil") == "Olive oil"


class TestParseQuantityExpression:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2", 2.0),
            ("1.5", 1.5),
            ("1/4", 0.25),
            ("1 1/2", 1.5),
            ("½", 0.5),
            ("1½", 1.5),
            ("¾", 0.75),
        ],
    )
    def test_parses(self, raw, expected):
        assert parse_quantity_expression(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["", "a pinch", "1/0", "0", "-2", "⅛"])
    def test_unparseable_defaults_to_one(self, raw):
        assert parse_quantity_expression(raw) == 1.0


class TestNormalizeUnit:
    def test_aliases(self):
        assert normalize_unit("Tbsp") == "tablespoon"
        assert normalize_unit("LBS") == "pound"
        assert normalize_unit(" fl  oz ") == "fluid ounce"

    def test_unknown_passes_through(self):
        assert normalize_unit("Pieces") == "pieces"


class TestNormalizeIngredientForShopping:
    def test_small_unit_rule(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="2 cups finely chopped onion", quantity="2", unit="cup")
        )
        assert entry == ShoppingEntry(text="Onion", quantity=1)

    def test_staple_ignores_amount(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="eggs", quantity="3", unit="")
        )
        assert entry == ShoppingEntry(text="Eggs", quantity=1)

    def test_staple_found_inside_name(self):
        """A staple term anywhere in the name counts, e.g. milk in buttermilk."""
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="buttermilk", quantity="2", unit="")
        )
        assert entry == ShoppingEntry(text="Buttermilk", quantity=1)

    def test_weight_rule_keeps_amount(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="ground beef", quantity="1.5", unit="lb")
        )
        assert entry == ShoppingEntry(text="Ground beef (1.5 lb)", quantity=1)

    @pytest.mark.parametrize("quantity", ["1-2", "about 2", "2 to 3"])
    def test_weight_rule_keeps_range(self, quantity):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="chicken thighs", quantity=quantity, unit="lb")
        )
        assert entry == ShoppingEntry(text=f"Chicken thighs ({quantity} lb)", quantity=1)

    def test_weight_without_amount_falls_back(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="chicken thighs", quantity="", unit="lb")
        )
        assert entry == ShoppingEntry(text="Chicken thighs", quantity=1)

    def test_count_range_uses_first_number(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="carrots", quantity="2-3", unit="")
        )
        assert entry == ShoppingEntry(text="Carrots", quantity=2)

    def test_count_rule_rounds_half_up(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="tomatoes", quantity="2.5", unit="")
        )
        assert entry == ShoppingEntry(text="Tomatoes", quantity=3)

    def test_count_rule_with_descriptor(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="carrots", quantity="2", unit="large")
        )
        assert entry.quantity == 2

    def test_count_below_one_falls_back(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="avocado", quantity="½", unit="")
        )
        assert entry == ShoppingEntry(text="Avocado", quantity=1)

    def test_other_unit_falls_back(self):
        entry = normalize_ingredient_for_shopping(
            RecipeIngredient(name="chicken thighs", quantity="4", unit="pieces")
        )
        assert entry == ShoppingEntry(text="Chicken thighs", quantity=1)
