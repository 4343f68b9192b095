"""Provider liveness checks for health and ops tooling.

Never called from the generation path. Every failure degrades to False.
"""

from typing import Sequence

from recipe_generation.prompts.prompts import AVAILABILITY_PROMPT
from recipe_generation.providers.base import TextProvider
from recipe_generation.utils.config import Config
from recipe_generation.utils.errors import safe_execute_async
from recipe_generation.utils.logger import logger
from recipe_generation.utils.timeout import with_timeout


class AvailabilityProber:
    """Availability Prober for text providers."""

    def __init__(self, providers: Sequence[TextProvider] = (), timeout_seconds: float = 10) -> None:
        self.providers = list(providers)
        self.timeout_seconds = timeout_seconds

    async def is_available(self, provider: TextProvider) -> bool:
        """Send the canned prompt; any non-empty, non-error answer means available."""
        logger.info(f"Checking {provider.name} service availability...")
        if not provider.configured:
            logger.info(f"{provider.name} service availability check: Unconfigured")
            return False

        text = await safe_execute_async(
            with_timeout(
                provider.generate_text(AVAILABILITY_PROMPT),
                self.timeout_seconds,
                operation_name=f"{provider.name} availability check",
            ),
            f"{provider.name} service check failed",
            log_level="error",
            default_return=None,
        )
        available = isinstance(text, str) and bool(text.strip())
        logger.info(
            f"{provider.name} service availability check: {'Available' if available else 'Unavailable'}"
        )
        return available

    async def check_all(self) -> dict[str, bool]:
        """Probe every registered provider sequentially."""
        return {provider.name: await self.is_available(provider) for provider in self.providers}


def configured_services(config: Config) -> dict[str, bool]:
    """Credential presence per service. No network calls."""
    services = {
        "openai": config.has_dalle,
        "freepik": config.has_freepik,
        "gemini": bool(config.GEMINI_API_KEY),
    }
    logger.info(f"Image service availability: {services}")
    return services
