"""Grocery list categorization and consolidation engine."""

from .classifier import Classifier
from .config import (
    ConsolidationConfig,
    DatabaseConfig,
    GroceryConfig,
    InferenceConfig,
    load_config,
)
from .consolidator import ConsolidationResult, Consolidator, consolidate
from .grocery_list import GroceryList
from .inference import InferenceBackend, create_backend
from .inference.category import CategoryInference
from .models import Item, Recipe, RecipeIngredient, ShoppingEntry
from .normalizer import (
    clean_preparation_terms,
    normalize_ingredient_for_shopping,
    normalize_item_text,
    parse_quantity_expression,
)
from .pantry import matches, needed_ingredients
from .recipe import load_recipe, parse_recipe
from .taxonomy import DEFAULT_TAXONOMY, Taxonomy, load_taxonomy

__all__ = [
    "Classifier",
    "CategoryInference",
    "InferenceBackend",
    "create_backend",
    "Consolidator",
    "ConsolidationResult",
    "consolidate",
    "GroceryList",
    "Item",
    "Recipe",
    "RecipeIngredient",
    "ShoppingEntry",
    "normalize_item_text",
    "clean_preparation_terms",
    "parse_quantity_expression",
    "normalize_ingredient_for_shopping",
    "matches",
    "needed_ingredients",
    "parse_recipe",
    "load_recipe",
    "Taxonomy",
    "DEFAULT_TAXONOMY",
    "load_taxonomy",
    "GroceryConfig",
    "InferenceConfig",
    "DatabaseConfig",
    "ConsolidationConfig",
    "load_config",
]
