"""Inference backend base class, errors, and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import GroceryConfig


class InferenceError(Exception):
    """The inference service failed to produce a usable answer."""


class RateLimitError(InferenceError):
    """The inference service asked us to slow down (HTTP 429)."""


class MalformedResponseError(InferenceError):
    """The inference service answered, but without usable text."""


class InferenceBackend(ABC):
    """Abstract base for a text-in, text-out language model service."""

    @abstractmethod
    async def infer(self, prompt: str) -> str:
        """Send one prompt and return the model's raw text reply.

        Raises:
            RateLimitError: If the service is rate limiting.
            MalformedResponseError: If the reply carries no text.
            InferenceError: For any other failure.
        """
        ...


def _is_rate_limit(exc: BaseException) -> bool:
    """Check SDK exceptions for an HTTP 429 status."""
    for attr in ("status_code", "code"):
        if getattr(exc, attr, None) == 429:
            return True
    return False


def create_backend(config: GroceryConfig) -> InferenceBackend | None:
    """Create an inference backend based on configuration.

    Returns None when inference is disabled (``backend = "none"``).
    """
    backend_name = config.inference.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiInferenceBackend

            return GeminiInferenceBackend(
                api_key=config.inference.gemini.api_key,
                model=config.inference.gemini.model,
            )
        case "claude":
            from .claude import ClaudeInferenceBackend

            return ClaudeInferenceBackend(
                api_key=config.inference.claude.api_key,
                model=config.inference.claude.model,
            )
        case "none":
            return None
        case _:
            raise ValueError(
                f"Unknown inference backend: {backend_name!r}  "
                f"(choose from gemini / claude / none)"
            )
