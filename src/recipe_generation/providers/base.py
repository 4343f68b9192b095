"""Provider adapter contracts.

Orchestrators only depend on these protocols, so vendors can be added,
removed or faked in tests without touching orchestration code. Image
providers are held in a plain sequence and tried in priority order.
"""

from typing import Optional, Protocol, runtime_checkable

from recipe_generation.models.models import ImageResult


@runtime_checkable
class TextProvider(Protocol):
    """Generative-text provider (e.g. Gemini)."""

    name: str

    @property
    def configured(self) -> bool:
        """True when credentials are present."""
        ...

    async def generate_text(self, prompt: str) -> str:
        """Return the raw model text.

        Raises:
            TransportError: On network failure or non-2xx response.
        """
        ...


@runtime_checkable
class ImageProvider(Protocol):
    """Image provider (generative model or stock-photo search)."""

    name: str
    timeout_seconds: float

    @property
    def configured(self) -> bool:
        """True when credentials are present. Unconfigured providers are skipped."""
        ...

    async def try_generate(self, prompt: str, subject_name: str) -> Optional[ImageResult]:
        """Return an image for the prompt/subject, or None for an empty result.

        Generative providers use `prompt`; search providers use `subject_name`.

        Raises:
            TransportError: On network failure or non-2xx response.
        """
        ...
