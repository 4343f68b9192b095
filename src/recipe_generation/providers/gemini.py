"""Gemini text provider adapter.

Wraps the synchronous google-genai client; calls run in a worker thread via
asyncio.to_thread so the event loop stays free. Any client or API failure,
and an empty answer, surface as TransportError.
"""

import asyncio
from typing import Optional

from google import genai
from google.genai import types

from recipe_generation.utils.config import Config
from recipe_generation.utils.errors import TransportError
from recipe_generation.utils.logger import logger


class GeminiTextProvider:
    """TextProvider backed by Gemini generate_content."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.2,
        max_output_tokens: int = 2048,
        client: Optional[genai.Client] = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: Gemini API key. An empty key leaves the provider unconfigured.
            model: Model id.
            temperature: Sampling temperature.
            max_output_tokens: Output token cap.
            client: Pre-built client (tests); created lazily otherwise.
        """
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client = client

    @classmethod
    def from_config(cls, config: Config) -> "GeminiTextProvider":
        return cls(
            api_key=config.GEMINI_API_KEY,
            model=config.GEMINI_MODEL,
            temperature=config.TEMPERATURE,
            max_output_tokens=config.MAX_OUTPUT_TOKENS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate_text(self, prompt: str) -> str:
        """Send one prompt and return the stripped response text.

        Raises:
            TransportError: If the provider is unconfigured, the call fails, or
                the response carries no text.
        """
        if not self.configured:
            raise TransportError("GEMINI_API_KEY is not configured", provider=self.name)

        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
        except Exception as e:
            status = getattr(e, "code", None)
            raise TransportError(
                f"Gemini request failed: {e}",
                provider=self.name,
                status=status if isinstance(status, int) else None,
            ) from e

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise TransportError("Gemini returned an empty response", provider=self.name)

        logger.debug(f"Gemini returned {len(text)} chars")
        return text
