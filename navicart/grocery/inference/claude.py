"""Claude API inference backend."""

from __future__ import annotations

from . import InferenceBackend, InferenceError, MalformedResponseError, RateLimitError


class ClaudeInferenceBackend(InferenceBackend):
    """Send classification prompts to Anthropic's Messages API."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 16,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens

    async def infer(self, prompt: str) -> str:
        if not self._api_key:
            raise InferenceError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=0,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.RateLimitError as e:
            raise RateLimitError(str(e)) from e
        except anthropic.APIError as e:
            raise InferenceError(f"Claude API error: {e}") from e

        return _extract_text(response)


def _extract_text(response) -> str:
    """Pull the first text block out of a Messages API response."""
    content = getattr(response, "content", None) or []
    for block in content:
        text = getattr(block, "text", None)
        if isinstance(text, str) and text.strip():
            return text
    raise MalformedResponseError("Claude response contained no text")
