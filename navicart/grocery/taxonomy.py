"""Grocery categories and the static lookup tables used to assign them."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Fixed iteration order; the first matching category wins ties.
CATEGORIES: tuple[str, ...] = (
    "Produce",
    "Dairy",
    "Meat",
    "Seafood",
    "Pantry",
    "Snacks",
    "Beverages",
    "Frozen",
    "Other",
)

CATCH_ALL = "Other"

# Exact phrases whose constituent words would be misrouted by keyword matching
# ("fish sauce" must not land in Seafood because of "fish").
COMPOUND_TERMS: dict[str, str] = {
    "fish sauce": "Pantry",
    "oyster sauce": "Pantry",
    "soy sauce": "Pantry",
    "hot sauce": "Pantry",
    "tomato sauce": "Pantry",
    "tomato paste": "Pantry",
    "peanut butter": "Pantry",
    "apple butter": "Pantry",
    "apple cider vinegar": "Pantry",
    "coconut milk": "Pantry",
    "chicken broth": "Pantry",
    "chicken stock": "Pantry",
    "beef broth": "Pantry",
    "beef stock": "Pantry",
    "vegetable broth": "Pantry",
    "vegetable stock": "Pantry",
    "fish stock": "Pantry",
    "clam juice": "Pantry",
    "cream of mushroom soup": "Pantry",
    "egg noodles": "Pantry",
    "black pepper": "Pantry",
    "red pepper flakes": "Pantry",
    "baking soda": "Pantry",
    "baking powder": "Pantry",
    "chocolate chips": "Pantry",
    "butternut squash": "Produce",
    "bell pepper": "Produce",
    "green onion": "Produce",
    "ice cream": "Frozen",
    "ice cream sandwich": "Frozen",
    "orange juice": "Beverages",
    "cream cheese": "Dairy",
}

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Produce": (
        "apple", "banana", "orange", "lettuce", "tomato", "carrot", "onion",
        "potato", "broccoli", "spinach", "cucumber", "pepper", "garlic",
        "lemon", "lime", "avocado", "celery", "mushroom", "zucchini", "kale",
        "ginger", "cilantro", "parsley", "basil", "scallion", "shallot",
        "eggplant", "fresh herbs", "fresh fruit", "fresh vegetable",
    ),
    "Dairy": (
        "milk", "cheese", "yogurt", "butter", "cream", "egg", "eggs",
        "whole milk", "skim milk", "sour cream", "cottage cheese",
        "cream cheese", "half and half", "whipped cream", "heavy cream",
        "almond milk", "oat milk", "soy milk",
    ),
    "Meat": (
        "chicken", "beef", "pork", "turkey", "ham", "steak", "ground beef",
        "bacon", "sausage", "lamb", "ground turkey", "ground pork", "veal",
        "duck", "fresh meat", "deli meat", "hot dog", "meatball",
    ),
    "Seafood": (
        "fish", "salmon", "tuna", "shrimp", "crab", "lobster", "scallop",
        "mussel", "clam", "oyster", "tilapia", "cod", "halibut", "fresh fish",
        "fresh seafood", "sushi grade", "calamari", "octopus",
    ),
    "Pantry": (
        "rice", "pasta", "bread", "cereal", "flour", "sugar", "oil",
        "vinegar", "sauce", "spice", "seasoning", "canned", "dried", "baking",
        "condiment", "syrup", "honey", "peanut butter", "jam", "jelly",
        "bean", "lentil", "grain", "salt", "vanilla extract",
    ),
    "Snacks": (
        "chips", "cookies", "crackers", "nuts", "candy", "chocolate",
        "popcorn", "pretzel", "granola bar", "protein bar", "trail mix",
        "dried fruit", "gummy", "snack",
    ),
    "Beverages": (
        "water", "juice", "soda", "coffee", "tea", "beer", "wine", "alcohol",
        "drink", "sparkling water", "energy drink", "sports drink",
        "orange juice", "apple juice", "grape juice", "coconut water",
    ),
    "Frozen": (
        "ice cream", "frozen pizza", "frozen vegetables", "frozen fruit",
        "frozen dinner", "frozen meal", "frozen food", "frozen", "ice",
        "popsicle", "frozen yogurt", "frozen meat", "frozen fish",
    ),
    "Other": (),
}

# Base ingredient → phrases that are fragments of the same purchased product.
# Order matters: the first base whose key or component set matches wins.
COMPONENT_RELATIONS: dict[str, tuple[str, ...]] = {
    "egg": (
        "eggs", "egg white", "egg whites", "egg yolk", "egg yolks",
        "whole egg", "whole eggs", "large egg", "large eggs",
    ),
    "garlic": (
        "garlic clove", "garlic cloves", "clove garlic", "cloves garlic",
        "clove of garlic", "cloves of garlic", "minced garlic",
    ),
    "lemon": ("lemons", "lemon juice", "lemon zest", "juice of lemon"),
    "lime": ("limes", "lime juice", "lime zest", "juice of lime"),
    "orange": ("oranges", "orange zest"),
    "scallion": (
        "scallions", "green onion", "green onions", "spring onion",
        "spring onions",
    ),
    "cilantro": ("cilantro leaves", "fresh cilantro", "coriander leaves"),
}


def _freeze_keywords(
    keywords: Mapping[str, tuple[str, ...] | list[str]],
) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({k: tuple(v) for k, v in keywords.items()})


@dataclass(frozen=True)
class Taxonomy:
    """The closed category set plus the tables used to assign categories.

    Instances are immutable; tests and configuration substitute their own
    tables by constructing a new ``Taxonomy``.
    """

    categories: tuple[str, ...] = CATEGORIES
    catch_all: str = CATCH_ALL
    compound_terms: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(COMPOUND_TERMS))
    )
    keywords: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _freeze_keywords(CATEGORY_KEYWORDS)
    )
    component_relations: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _freeze_keywords(COMPONENT_RELATIONS)
    )

    def __post_init__(self) -> None:
        if self.catch_all not in self.categories:
            raise ValueError(
                f"catch-all category {self.catch_all!r} is not in the category set"
            )
        for term, category in self.compound_terms.items():
            if category not in self.categories:
                raise ValueError(
                    f"compound term {term!r} maps to unknown category {category!r}"
                )
        for category in self.keywords:
            if category not in self.categories:
                raise ValueError(f"keywords given for unknown category {category!r}")

    def is_category(self, label: str) -> bool:
        return label in self.categories

    def keywords_for(self, category: str) -> tuple[str, ...]:
        return tuple(self.keywords.get(category, ()))

    def base_ingredient(self, normalized_text: str) -> str | None:
        """Return the base ingredient a normalized item text belongs to."""
        for base, components in self.component_relations.items():
            if normalized_text == base or normalized_text in components:
                return base
        return None


DEFAULT_TAXONOMY = Taxonomy()


def load_taxonomy(path: str | Path | None = None) -> Taxonomy:
    """Load taxonomy tables from a TOML file.

    The file may contain ``[compound_terms]``, ``[keywords]`` and
    ``[components]`` tables; each one present replaces the built-in table.
    Falls back to the built-in taxonomy if no path is given or the file
    doesn't exist.
    """
    if path is None or not str(path):
        return DEFAULT_TAXONOMY

    p = Path(path).expanduser()
    if not p.exists():
        return DEFAULT_TAXONOMY

    if tomllib is None:
        raise ImportError("tomli is required on Python < 3.11: pip install tomli")
    with open(p, "rb") as f:
        raw = tomllib.load(f)

    compound = raw.get("compound_terms")
    keywords = raw.get("keywords")
    components = raw.get("components")

    return Taxonomy(
        compound_terms=MappingProxyType(
            {k.strip().lower(): v for k, v in compound.items()}
        )
        if compound is not None
        else DEFAULT_TAXONOMY.compound_terms,
        keywords=_freeze_keywords(
            {cat: [w.strip().lower() for w in words] for cat, words in keywords.items()}
        )
        if keywords is not None
        else DEFAULT_TAXONOMY.keywords,
        component_relations=_freeze_keywords(
            {
                base.strip().lower(): [w.strip().lower() for w in words]
                for base, words in components.items()
            }
        )
        if components is not None
        else DEFAULT_TAXONOMY.component_relations,
    )
