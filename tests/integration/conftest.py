"""Pytest configuration and fixtures for integration tests.

Ensures environment variables are loaded and validates required API keys
before running integration tests against the live providers.
"""

import os
import pytest
from dotenv import load_dotenv
from pathlib import Path

from recipe_generation.utils.config import Config


def pytest_configure(config):
    """Load .env from the project root before test collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests require a valid GEMINI_API_KEY")
    print("OPENAI_API_KEY / FREEPIK_API_KEY are optional (image tests skip without them)")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip every integration test if GEMINI_API_KEY is not configured."""
    if not os.getenv("GEMINI_API_KEY"):
        pytest.skip(
            "Integration tests skipped. Missing API keys: GEMINI_API_KEY. Please set it in your .env file.",
            allow_module_level=True,
        )


@pytest.fixture
def live_config():
    """Config built from the real environment, with short retry delays."""
    config = Config()
    config.DELAY_BETWEEN_RETRIES = 1
    return config
