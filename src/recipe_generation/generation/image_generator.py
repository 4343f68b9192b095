"""Recipe image generation with provider fallback and bounded retries.

Each attempt is a two-stage pipeline:

Stage A - prompt derivation: ask the text provider for a vivid visual
description of the dish. Any failure (timeout, transport error, empty answer)
falls back to a deterministic template, so this stage never aborts.

Stage B - fallback chain: try image providers in priority order (generative
model first, stock search second). Unconfigured providers are skipped without
a network call; the first non-empty result wins; errors and timeouts are
logged and the chain moves on.

An attempt that yields nothing is retried with exponential backoff up to a
finite cap. Exhaustion returns None: a recipe without an image is a complete
result, so nothing here ever raises to the caller.
"""

import asyncio
import time
from typing import Optional, Sequence

from recipe_generation.generation.recipe_generator import backoff_delay, classify_failure
from recipe_generation.models.models import AttemptOutcome, ImageResult, ProviderAttempt
from recipe_generation.prompts.prompts import fallback_image_prompt, get_image_prompt_request
from recipe_generation.providers.base import ImageProvider, TextProvider
from recipe_generation.utils.config import Config
from recipe_generation.utils.errors import safe_execute_async
from recipe_generation.utils.logger import logger
from recipe_generation.utils.timeout import with_timeout


class ImageGenerator:
    """Image Generation Orchestrator."""

    def __init__(
        self,
        text_provider: Optional[TextProvider],
        image_providers: Sequence[ImageProvider],
        max_attempts: int = 3,
        prompt_timeout_seconds: float = 10,
        base_delay: float = 2,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            text_provider: Provider used for prompt derivation. None (or
                unconfigured) means the fallback template is always used.
            image_providers: Providers in priority order (highest fidelity first).
            max_attempts: Full pipeline attempts; must be finite (default: 3).
            prompt_timeout_seconds: Deadline for prompt derivation (default: 10).
            base_delay: First backoff delay in seconds, doubled each retry (default: 2).

        Raises:
            ValueError: If max_attempts < 1.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got: {max_attempts}")
        self.text_provider = text_provider
        self.image_providers = list(image_providers)
        self.max_attempts = max_attempts
        self.prompt_timeout_seconds = prompt_timeout_seconds
        self.base_delay = base_delay

    @classmethod
    def from_config(
        cls,
        text_provider: Optional[TextProvider],
        image_providers: Sequence[ImageProvider],
        config: Config,
    ) -> "ImageGenerator":
        return cls(
            text_provider=text_provider,
            image_providers=image_providers,
            max_attempts=config.IMAGE_MAX_RETRIES,
            prompt_timeout_seconds=config.IMAGE_PROMPT_TIMEOUT_SECONDS,
            base_delay=config.DELAY_BETWEEN_RETRIES,
        )

    @property
    def configured_providers(self) -> list[ImageProvider]:
        return [provider for provider in self.image_providers if provider.configured]

    async def derive_prompt(self, subject_name: str, subject_description: str = "") -> str:
        """Stage A: visual description from the text provider, or the fallback template."""
        fallback = fallback_image_prompt(subject_name)
        if self.text_provider is None or not self.text_provider.configured:
            return fallback

        prompt = await safe_execute_async(
            with_timeout(
                self.text_provider.generate_text(get_image_prompt_request(subject_name, subject_description)),
                self.prompt_timeout_seconds,
                operation_name="Image prompt derivation",
            ),
            f"Failed to generate image prompt for {subject_name}, using fallback",
            default_return=None,
        )
        prompt = (prompt or "").strip()
        if not prompt:
            return fallback

        logger.debug(f"Generated image prompt for {subject_name}: {prompt[:100]}...")
        return prompt

    async def _try_provider(
        self, provider: ImageProvider, prompt: str, subject_name: str, attempt: int
    ) -> Optional[ImageResult]:
        started = time.monotonic()
        try:
            result = await with_timeout(
                provider.try_generate(prompt, subject_name),
                provider.timeout_seconds,
                operation_name=f"{provider.name} image generation",
            )
        except Exception as e:
            record = ProviderAttempt(
                provider_name=provider.name,
                attempt_number=attempt,
                outcome=classify_failure(e),
                latency_ms=int((time.monotonic() - started) * 1000),
            )
            logger.warning(f"{provider.name} failed for {subject_name}: {e}", extra=record.log_extra())
            return None

        if result is None:
            logger.info(f"{provider.name} returned no image for: {subject_name}")
            return None

        record = ProviderAttempt(
            provider_name=provider.name,
            attempt_number=attempt,
            outcome=AttemptOutcome.SUCCESS,
            latency_ms=int((time.monotonic() - started) * 1000),
        )
        logger.info(f"✅ Image obtained using {provider.name} for: {subject_name}", extra=record.log_extra())
        return result

    async def _run_chain(self, prompt: str, subject_name: str, attempt: int) -> Optional[ImageResult]:
        """Stage B: first non-empty result in priority order."""
        for provider in self.image_providers:
            if not provider.configured:
                logger.debug(f"{provider.name} not configured, skipping")
                continue
            result = await self._try_provider(provider, prompt, subject_name, attempt)
            if result is not None:
                return result
        return None

    async def generate_image(self, subject_name: str, subject_description: str = "") -> Optional[ImageResult]:
        """Generate or find an image for the dish.

        Returns:
            ImageResult from the first provider that succeeds, or None once every
            attempt is exhausted or when no image provider is configured.
        """
        if not self.configured_providers:
            logger.info(f"No image provider configured, skipping image for: {subject_name}")
            return None

        logger.info(f"Starting image generation for: {subject_name}", extra={"subject": subject_name})

        for attempt in range(1, self.max_attempts + 1):
            logger.info(f"Image generation attempt {attempt}/{self.max_attempts} for: {subject_name}")
            try:
                prompt = await self.derive_prompt(subject_name, subject_description or "")
                result = await self._run_chain(prompt, subject_name, attempt)
            except Exception as e:
                logger.error(f"Unexpected error in image generation attempt {attempt} for {subject_name}: {e}")
                result = None

            if result is not None:
                return result

            if attempt == self.max_attempts:
                break

            delay = backoff_delay(attempt, self.base_delay)
            logger.info(f"Retrying image generation for {subject_name} in {delay:g}s...")
            await asyncio.sleep(delay)

        logger.error(f"❌ All image generation methods failed for: {subject_name} after {self.max_attempts} attempts")
        return None
