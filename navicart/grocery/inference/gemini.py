"""Gemini API inference backend."""

from __future__ import annotations

from . import (
    InferenceBackend,
    InferenceError,
    MalformedResponseError,
    RateLimitError,
    _is_rate_limit,
)


class GeminiInferenceBackend(InferenceBackend):
    """Send classification prompts to Google Gemini."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-2.0-flash",
        max_output_tokens: int = 16,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_output_tokens = max_output_tokens

    async def infer(self, prompt: str) -> str:
        if not self._api_key:
            raise InferenceError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        try:
            response = await model.generate_content_async(
                prompt,
                generation_config={
                    "temperature": 0,
                    "max_output_tokens": self._max_output_tokens,
                    "top_p": 1,
                    "top_k": 1,
                },
            )
        except Exception as e:
            # google.api_core raises ResourceExhausted (code 429) when throttled
            if _is_rate_limit(e):
                raise RateLimitError(str(e)) from e
            raise InferenceError(f"Gemini API error: {e}") from e

        try:
            text = response.text
        except (ValueError, AttributeError, IndexError) as e:
            # .text raises when the candidate was blocked or is empty
            raise MalformedResponseError(f"Gemini response contained no text: {e}") from e

        if not isinstance(text, str) or not text.strip():
            raise MalformedResponseError("Gemini response contained no text")
        return text
