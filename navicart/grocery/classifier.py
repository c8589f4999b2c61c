"""Tiered item classification against the taxonomy tables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .normalizer import normalize_item_text
from .taxonomy import DEFAULT_TAXONOMY, Taxonomy

if TYPE_CHECKING:
    from .inference.category import CategoryInference


class Classifier:
    """Assign an item description to exactly one taxonomy category.

    Local rules are tried in order: exact compound term, exact keyword,
    multi-word keyword contained in the text, then any keyword/text partial
    match. Within a tier the first category in taxonomy order wins. Only if
    none fires is the inference fallback consulted.
    """

    def __init__(
        self,
        taxonomy: Taxonomy = DEFAULT_TAXONOMY,
        inference: CategoryInference | None = None,
    ) -> None:
        self._taxonomy = taxonomy
        self._inference = inference

    @property
    def taxonomy(self) -> Taxonomy:
        return self._taxonomy

    def _searchable(self) -> list[tuple[str, tuple[str, ...]]]:
        tax = self._taxonomy
        return [
            (category, tax.keywords_for(category))
            for category in tax.categories
            if category != tax.catch_all
        ]

    def classify_locally(self, raw_text: str) -> str | None:
        """Classify using the static tables only.

        Returns:
            The matched category, the catch-all for blank text, or None if no
            local rule fired.
        """
        text = normalize_item_text(raw_text)
        if not text:
            return self._taxonomy.catch_all

        compound = self._taxonomy.compound_terms.get(text)
        if compound is not None:
            return compound

        searchable = self._searchable()

        for category, keywords in searchable:
            if text in keywords:
                return category

        # Multi-word keywords first, so "orange juice" beats "orange"
        for category, keywords in searchable:
            if any(" " in kw and kw in text for kw in keywords):
                return category

        for category, keywords in searchable:
            if any(kw in text or text in kw for kw in keywords):
                return category

        return None

    async def classify(self, raw_text: str) -> str:
        """Return the category for an item description. Never raises."""
        category = self.classify_locally(raw_text)
        if category is not None:
            return category
        if self._inference is None:
            return self._taxonomy.catch_all
        return await self._inference.infer_category(raw_text.strip())
