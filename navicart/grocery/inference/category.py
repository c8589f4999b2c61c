"""Category inference with retry, backoff, and output validation."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from ..taxonomy import DEFAULT_TAXONOMY, Taxonomy
from . import InferenceBackend, RateLimitError

logger = logging.getLogger(__name__)

_PROMPT = """\
Categorize this grocery item: "{item}" into exactly one of these categories: \
{categories}. Reply with just the category name and nothing else."""


def build_prompt(text: str, categories: Sequence[str]) -> str:
    """Build the single-item classification prompt."""
    return _PROMPT.format(item=text, categories=", ".join(categories))


class CategoryInference:
    """Ask an inference backend for a category, never trusting its output.

    Every exception raised by the backend (rate limit, malformed response,
    network or status error) consumes one of ``max_attempts`` attempts;
    attempts are separated by a delay starting at ``base_delay`` seconds and
    doubling each time. A reply that arrives is not retried: if it is empty
    or not exactly one of the taxonomy's categories, the catch-all category
    is returned at once, as it is after exhausted retries.
    ``infer_category`` never raises.
    """

    def __init__(
        self,
        backend: InferenceBackend,
        taxonomy: Taxonomy = DEFAULT_TAXONOMY,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._backend = backend
        self._taxonomy = taxonomy
        self._max_attempts = max(1, max_attempts)
        self._base_delay = base_delay
        self._sleep = sleep

    async def infer_category(self, text: str) -> str:
        catch_all = self._taxonomy.catch_all
        prompt = build_prompt(text, self._taxonomy.categories)

        for attempt in range(self._max_attempts):
            try:
                reply = await self._backend.infer(prompt)
            except RateLimitError as e:
                reason = f"rate limited: {e}"
            except Exception as e:
                reason = f"{type(e).__name__}: {e}"
            else:
                label = reply.strip() if isinstance(reply, str) else ""
                if self._taxonomy.is_category(label):
                    logger.debug("Inferred category %s for %r", label, text)
                    return label
                logger.warning(
                    "Inference returned invalid category %r for %r; using %s",
                    label, text, catch_all,
                )
                return catch_all

            logger.warning(
                "Category inference attempt %d/%d failed for %r: %s",
                attempt + 1, self._max_attempts, text, reason,
            )
            if attempt < self._max_attempts - 1:
                await self._sleep(self._base_delay * (2 ** attempt))

        logger.warning(
            "Category inference exhausted %d attempts for %r; using %s",
            self._max_attempts, text, catch_all,
        )
        return catch_all
