"""Item text normalization and recipe-quantity to shopping-quantity rules."""

from __future__ import annotations

import re

from .models import RecipeIngredient, ShoppingEntry

# Unicode vulgar fractions, resolved by table lookup only
_FRACTION_MAP: dict[str, float] = {
    "½": 0.5,
    "¼": 0.25,
    "¾": 0.75,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
}

_FRACTION_CHARS = "".join(_FRACTION_MAP)

_DECIMAL = re.compile(r"^(?:\d+(?:\.\d+)?|\.\d+)$")
_ASCII_FRACTION = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_MIXED_FRACTION = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)$")
_UNICODE_FRACTION = re.compile(rf"^(\d+)?\s*([{_FRACTION_CHARS}])$")

# Alias → canonical unit label
_UNIT_ALIASES: dict[str, str] = {
    "t": "teaspoon",
    "tsp": "teaspoon",
    "tsps": "teaspoon",
    "teaspoons": "teaspoon",
    "tbs": "tablespoon",
    "tbsp": "tablespoon",
    "tbsps": "tablespoon",
    "tablespoons": "tablespoon",
    "c": "cup",
    "cups": "cup",
    "pinches": "pinch",
    "dashes": "dash",
    "oz": "ounce",
    "ounces": "ounce",
    "fl oz": "fluid ounce",
    "fl. oz": "fluid ounce",
    "fl. oz.": "fluid ounce",
    "fluid ounces": "fluid ounce",
    "lb": "pound",
    "lbs": "pound",
    "lb.": "pound",
    "lbs.": "pound",
    "pounds": "pound",
}

# Amounts too small to shop by: the whole package is bought anyway
_SMALL_UNITS: frozenset[str] = frozenset({
    "teaspoon",
    "tablespoon",
    "cup",
    "pinch",
    "dash",
    "ounce",
    "fluid ounce",
    "to taste",
})

_WEIGHT_UNITS: frozenset[str] = frozenset({"pound"})

_COUNT_DESCRIPTORS: frozenset[str] = frozenset({"", "whole", "medium", "large", "small"})

# Staples bought as a single packaged unit regardless of the recipe amount
_COMMON_ITEMS: tuple[str, ...] = (
    "milk",
    "egg",
    "butter",
    "sugar",
    "flour",
    "salt",
    "pepper",
    "oil",
    "vanilla extract",
    "cream",
    "yogurt",
    "pie crust",
    "pasta",
    "rice",
)

# Ranges and approximations ("1-2", "about 2") are shopped by their first number
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d+)?")

# Cookery qualifiers removed from ingredient names (longest first)
_PREPARATION_TERMS: tuple[str, ...] = tuple(sorted(
    (
        "at room temperature", "room temperature", "to taste", "for garnish",
        "for serving", "chopped", "diced", "minced", "sliced", "grated",
        "shredded", "crushed", "peeled", "seeded", "cored", "trimmed",
        "cubed", "halved", "quartered", "julienned", "mashed", "melted",
        "softened", "beaten", "whisked", "sifted", "packed", "drained",
        "rinsed", "toasted", "divided", "optional", "finely", "roughly",
        "coarsely", "thinly", "freshly", "lightly", "firmly",
    ),
    key=len,
    reverse=True,
))

_PREPARATION_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(t) for t in _PREPARATION_TERMS) + r")\b",
    re.IGNORECASE,
)

_MEASURE_WORDS = (
    r"cups?|c|tablespoons?|tbsps?|tbs|teaspoons?|tsps?|ounces?|oz|"
    r"pounds?|lbs?|grams?|g|kg|ml|liters?|litres?|pinch(?:es)?|dash(?:es)?|"
    r"cloves?|cans?|packages?|sticks?|slices?|bunch(?:es)?|heads?"
)

# "2 cups ", "1 1/2 tbsp. of ", "½ "
_LEADING_MEASURE = re.compile(
    rf"^\s*[\d{_FRACTION_CHARS}][\d{_FRACTION_CHARS}./\s-]*"
    rf"(?:\b(?:{_MEASURE_WORDS})\b\.?\s*(?:of\s+)?)?",
    re.IGNORECASE,
)

_PARENTHESIZED = re.compile(r"\([^)]*\)?")
_DANGLING_CONNECTOR = re.compile(r"^(?:and|or|&)\s+|\s+(?:and|or|&)$", re.IGNORECASE)


def normalize_item_text(raw: str) -> str:
    """Lower-case and trim item text; the result is the dedup key."""
    return raw.strip().lower()


def clean_preparation_terms(name: str) -> str:
    """Strip measurements, asides and cookery qualifiers from an ingredient name.

    Args:
        name: e.g. "2 cups finely chopped onion", "butter (softened)"

    Returns:
        The bare ingredient name with its first letter capitalized, e.g.
        "Onion". If nothing would be left, the input is returned unchanged.
    """
    cleaned = _LEADING_MEASURE.sub("", name)
    cleaned = _PREPARATION_PATTERN.sub(" ", cleaned)
    cleaned = _PARENTHESIZED.sub(" ", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    # Anything after a comma is another qualifier ("onion, halved")
    cleaned = cleaned.split(",")[0].strip()
    cleaned = _DANGLING_CONNECTOR.sub("", cleaned).strip(" -;:.")

    if not cleaned:
        return name
    return cleaned[0].upper() + cleaned[1:]


def parse_quantity_expression(raw: str) -> float:
    """Parse a recipe quantity string.

    Args:
        raw: e.g. "2", "1.5", "1/4", "1 1/2", "½", "1½"

    Returns:
        The amount as a positive float. Defaults to 1.0 if unparseable.
    """
    amount = _parse_number(raw or "")
    if amount is None or amount <= 0:
        return 1.0
    return amount


def _parse_number(s: str) -> float | None:
    """Parse a number string that may contain fractions."""
    s = s.strip()
    if not s:
        return None

    if _DECIMAL.match(s):
        return float(s)

    m = _ASCII_FRACTION.match(s)
    if m:
        num, den = int(m.group(1)), int(m.group(2))
        return num / den if den else None

    m = _MIXED_FRACTION.match(s)
    if m:
        whole, num, den = int(m.group(1)), int(m.group(2)), int(m.group(3))
        return whole + num / den if den else None

    m = _UNICODE_FRACTION.match(s)
    if m:
        whole = int(m.group(1)) if m.group(1) else 0
        return whole + _FRACTION_MAP[m.group(2)]

    return None


def normalize_unit(unit: str) -> str:
    """Map a measurement unit to its canonical label ("Tbsp" → "tablespoon")."""
    key = re.sub(r"\s+", " ", unit.strip().lower())
    return _UNIT_ALIASES.get(key, key)


def _is_common_item(name: str) -> bool:
    lowered = name.lower()
    return any(term in lowered for term in _COMMON_ITEMS)


def _shopping_amount(raw: str) -> float | None:
    """Amount used by the weight and count rules, or None if there is none."""
    amount = _parse_number(raw)
    if amount is None:
        m = _LEADING_NUMBER.search(raw)
        amount = float(m.group()) if m else None
    if amount is None or amount <= 0:
        return None
    return amount


def normalize_ingredient_for_shopping(ingredient: RecipeIngredient) -> ShoppingEntry:
    """Reduce a recipe ingredient to the text and count to shop for.

    Rules are applied in order:
        1. staples (milk, eggs, butter, ...) → one unit, recipe amount ignored
        2. small units (teaspoon, cup, pinch, ...) → one unit
        3. weight units (lb/pound) → weight kept in parentheses, one unit
        4. bare counts (empty unit or whole/medium/large/small) → rounded count
        5. otherwise → one unit
    """
    name = clean_preparation_terms(ingredient.name.strip())
    raw_quantity = (ingredient.quantity or "").strip()
    raw_unit = (ingredient.unit or "").strip().lower()
    unit = normalize_unit(raw_unit)

    if _is_common_item(name):
        return ShoppingEntry(text=name, quantity=1)

    if unit in _SMALL_UNITS:
        return ShoppingEntry(text=name, quantity=1)

    amount = _shopping_amount(raw_quantity)

    if unit in _WEIGHT_UNITS and amount is not None:
        return ShoppingEntry(text=f"{name} ({raw_quantity} {raw_unit})", quantity=1)

    if unit in _COUNT_DESCRIPTORS and amount is not None and amount >= 1:
        # Round half up; round() would send 2.5 to 2
        return ShoppingEntry(text=name, quantity=int(amount + 0.5))

    return ShoppingEntry(text=name, quantity=1)
