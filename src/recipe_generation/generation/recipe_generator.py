"""Structured recipe generation with bounded retries.

RecipeGenerator drives one text provider through up to MAX_RETRIES sequential
attempts. Each attempt: build the recipe prompt, call the provider under a
deadline, normalize the text, validate the payload. The first valid recipe is
returned immediately. Failures back off exponentially (2s → 4s → 8s) and the
final failure raises GenerationExhaustedError wrapping the last error.
"""

import asyncio
import time
from typing import Optional

from recipe_generation.generation.normalizer import parse_structured_payload
from recipe_generation.generation.validator import validate_recipe_payload
from recipe_generation.models.models import AttemptOutcome, ProviderAttempt, StructuredRecipe
from recipe_generation.prompts.prompts import get_recipe_prompt
from recipe_generation.providers.base import TextProvider
from recipe_generation.utils.config import Config
from recipe_generation.utils.errors import (
    GenerationExhaustedError,
    NoStructuredPayloadError,
    ProviderTimeoutError,
    SchemaValidationError,
    TransportError,
)
from recipe_generation.utils.logger import logger
from recipe_generation.utils.timeout import with_timeout


def backoff_delay(attempt: int, base_delay: float) -> float:
    """Delay after failed attempt `attempt` (1-based): base, 2*base, 4*base, ..."""
    return base_delay * (2 ** (attempt - 1))


def classify_failure(error: Exception) -> AttemptOutcome:
    if isinstance(error, ProviderTimeoutError):
        return AttemptOutcome.TIMEOUT
    if isinstance(error, (NoStructuredPayloadError, SchemaValidationError)):
        return AttemptOutcome.VALIDATION_ERROR
    return AttemptOutcome.TRANSPORT_ERROR


class RecipeGenerator:
    """Text Generation Orchestrator."""

    def __init__(
        self,
        provider: TextProvider,
        max_attempts: int = 3,
        timeout_seconds: float = 30,
        base_delay: float = 2,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            provider: Text provider adapter.
            max_attempts: Sequential attempts before giving up (default: 3).
            timeout_seconds: Deadline per provider call (default: 30).
            base_delay: First backoff delay in seconds, doubled each retry (default: 2).

        Raises:
            ValueError: If max_attempts < 1.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got: {max_attempts}")
        self.provider = provider
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self.base_delay = base_delay

    @classmethod
    def from_config(cls, provider: TextProvider, config: Config) -> "RecipeGenerator":
        return cls(
            provider=provider,
            max_attempts=config.MAX_RETRIES,
            timeout_seconds=config.TEXT_TIMEOUT_SECONDS,
            base_delay=config.DELAY_BETWEEN_RETRIES,
        )

    async def _attempt(self, subject_name: str) -> StructuredRecipe:
        prompt = get_recipe_prompt(subject_name)
        try:
            raw_text = await with_timeout(
                self.provider.generate_text(prompt),
                self.timeout_seconds,
                operation_name=f"{self.provider.name} recipe generation",
            )
        except (ProviderTimeoutError, TransportError):
            raise
        except Exception as e:
            # Adapters that leak raw client errors are treated as transport failures
            raise TransportError(str(e), provider=self.provider.name) from e

        payload = parse_structured_payload(raw_text)
        return validate_recipe_payload(payload)

    async def generate_structured(self, subject_name: str) -> StructuredRecipe:
        """Generate a validated recipe for `subject_name`.

        Returns:
            StructuredRecipe from the first successful attempt.

        Raises:
            GenerationExhaustedError: After max_attempts failed attempts.
        """
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            logger.info(
                f"{self.provider.name} attempt {attempt}/{self.max_attempts} for recipe: {subject_name}",
                extra={"subject": subject_name},
            )
            started = time.monotonic()
            try:
                recipe = await self._attempt(subject_name)
            except (ProviderTimeoutError, TransportError, NoStructuredPayloadError, SchemaValidationError) as e:
                last_error = e
                record = ProviderAttempt(
                    provider_name=self.provider.name,
                    attempt_number=attempt,
                    outcome=classify_failure(e),
                    latency_ms=int((time.monotonic() - started) * 1000),
                )
                logger.warning(
                    f"{self.provider.name} attempt {attempt} failed for {subject_name} "
                    f"({record.outcome.value}): {e}",
                    extra=record.log_extra(),
                )

                if attempt == self.max_attempts:
                    break

                delay = backoff_delay(attempt, self.base_delay)
                logger.info(f"Retrying {self.provider.name} for {subject_name} in {delay:g}s...")
                await asyncio.sleep(delay)
                continue

            record = ProviderAttempt(
                provider_name=self.provider.name,
                attempt_number=attempt,
                outcome=AttemptOutcome.SUCCESS,
                latency_ms=int((time.monotonic() - started) * 1000),
            )
            logger.info(f"Successfully generated recipe for: {subject_name}", extra=record.log_extra())
            return recipe

        logger.error(f"All {self.provider.name} attempts failed for {subject_name}: {last_error}")
        raise GenerationExhaustedError(last_error, self.max_attempts)
