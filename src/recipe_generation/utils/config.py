"""Configuration management for the Recipe Generation Service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults

The Config instance is passed explicitly into every orchestrator and provider
adapter, so tests can build one from a patched environment (or tweak
attributes directly) without touching process-wide state.
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Text provider (Gemini): required for recipe generation
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

        # Image providers: an empty key means the provider is skipped, not an error
        # OpenAI DALL-E (generative, highest fidelity, tried first)
        self.OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
        self.OPENAI_IMAGE_MODEL: str = os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3")
        self.OPENAI_IMAGE_SIZE: str = os.getenv("OPENAI_IMAGE_SIZE", "1024x1024")
        self.OPENAI_IMAGE_QUALITY: str = os.getenv("OPENAI_IMAGE_QUALITY", "standard")
        # Freepik (stock photo search, carries attribution, tried second)
        self.FREEPIK_API_KEY: str = os.getenv("FREEPIK_API_KEY", "")
        # Master switch for the image pipeline
        self.ENABLE_IMAGE_GENERATION: bool = _env_bool("ENABLE_IMAGE_GENERATION", "true")

        # Retry Configuration
        # MAX_RETRIES: text generation attempts (sequential, exponential backoff)
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # IMAGE_MAX_RETRIES: full image pipeline attempts. Always finite.
        self.IMAGE_MAX_RETRIES: int = int(os.getenv("IMAGE_MAX_RETRIES", "3"))
        # DELAY_BETWEEN_RETRIES: initial delay in seconds, doubled each retry (2s → 4s → 8s)
        self.DELAY_BETWEEN_RETRIES: float = float(os.getenv("DELAY_BETWEEN_RETRIES", "2"))

        # Timeouts (seconds)
        self.TEXT_TIMEOUT_SECONDS: float = float(os.getenv("TEXT_TIMEOUT_SECONDS", "30"))
        self.IMAGE_PROMPT_TIMEOUT_SECONDS: float = float(os.getenv("IMAGE_PROMPT_TIMEOUT_SECONDS", "10"))
        self.GENERATIVE_IMAGE_TIMEOUT_SECONDS: float = float(os.getenv("GENERATIVE_IMAGE_TIMEOUT_SECONDS", "30"))
        self.SEARCH_IMAGE_TIMEOUT_SECONDS: float = float(os.getenv("SEARCH_IMAGE_TIMEOUT_SECONDS", "15"))
        self.AVAILABILITY_TIMEOUT_SECONDS: float = float(os.getenv("AVAILABILITY_TIMEOUT_SECONDS", "10"))

        # LLM Model Parameters
        # Temperature: 0.2 balances creativity with consistent JSON output
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.2"))
        # Max Output Tokens: 2048 is sufficient for a full recipe with instructions
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))

    @property
    def has_dalle(self) -> bool:
        return bool(self.OPENAI_API_KEY)

    @property
    def has_freepik(self) -> bool:
        return bool(self.FREEPIK_API_KEY)

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If required API keys are missing or invalid values provided.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if self.MAX_RETRIES < 1:
            raise ValueError(f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}")
        if not (1 <= self.IMAGE_MAX_RETRIES <= 10):
            raise ValueError(
                f"IMAGE_MAX_RETRIES must be between 1 and 10, got: {self.IMAGE_MAX_RETRIES}"
            )
        if self.DELAY_BETWEEN_RETRIES <= 0:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must be positive, got: {self.DELAY_BETWEEN_RETRIES}"
            )
        for name in (
            "TEXT_TIMEOUT_SECONDS",
            "IMAGE_PROMPT_TIMEOUT_SECONDS",
            "GENERATIVE_IMAGE_TIMEOUT_SECONDS",
            "SEARCH_IMAGE_TIMEOUT_SECONDS",
            "AVAILABILITY_TIMEOUT_SECONDS",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got: {value}")
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}")
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}")
