"""Unit tests for the structured recipe orchestrator.

Tests cover:
- Single-attempt success with fenced and bare JSON
- Retry after schema validation failure with backoff
- Exhaustion after repeated timeouts (exact call count and delays)
- Transport and normalization failures
- Backoff schedule
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from fakes import HANG, PIZZA_JSON, FakeTextProvider
from recipe_generation.generation.recipe_generator import RecipeGenerator, backoff_delay, classify_failure
from recipe_generation.models.models import AttemptOutcome
from recipe_generation.utils.config import Config
from recipe_generation.utils.errors import (
    GenerationExhaustedError,
    NoStructuredPayloadError,
    ProviderTimeoutError,
    SchemaValidationError,
    TransportError,
)

SLEEP = "recipe_generation.generation.recipe_generator.asyncio.sleep"

MISSING_INSTRUCTIONS = '{"name": "Margherita Pizza", "ingredients": [{"item": "dough"}]}'


class TestBackoff:
    def test_backoff_doubles(self):
        assert [backoff_delay(n, 2) for n in (1, 2, 3)] == [2, 4, 8]

    def test_classify_failure(self):
        assert classify_failure(ProviderTimeoutError(1)) is AttemptOutcome.TIMEOUT
        assert classify_failure(SchemaValidationError(["name"])) is AttemptOutcome.VALIDATION_ERROR
        assert classify_failure(NoStructuredPayloadError("x")) is AttemptOutcome.VALIDATION_ERROR
        assert classify_failure(TransportError("down")) is AttemptOutcome.TRANSPORT_ERROR


class TestRecipeGeneratorInit:
    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RecipeGenerator(FakeTextProvider(["{}"]), max_attempts=0)

    def test_from_config(self, monkeypatch):
        monkeypatch.setenv("MAX_RETRIES", "4")
        monkeypatch.setenv("TEXT_TIMEOUT_SECONDS", "12")
        monkeypatch.setenv("DELAY_BETWEEN_RETRIES", "1")

        generator = RecipeGenerator.from_config(FakeTextProvider(["{}"]), Config())

        assert generator.max_attempts == 4
        assert generator.timeout_seconds == 12
        assert generator.base_delay == 1


class TestGenerateStructured:
    """Test the bounded retry loop."""

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_fenced_json_succeeds_first_attempt(self, mock_sleep):
        """The Margherita example returns after one call."""
        provider = FakeTextProvider([f"```json\n{PIZZA_JSON}\n```"])
        generator = RecipeGenerator(provider)

        recipe = await generator.generate_structured("Margherita Pizza")

        assert recipe.name == "Margherita Pizza"
        assert recipe.ingredients[0].item == "dough"
        assert recipe.instructions[0].instruction == "Bake"
        assert len(provider.prompts) == 1
        mock_sleep.assert_not_called()

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_prompt_embeds_subject_and_fields(self, mock_sleep):
        provider = FakeTextProvider([PIZZA_JSON])

        await RecipeGenerator(provider).generate_structured("Pad Thai")

        prompt = provider.prompts[0]
        assert '"Pad Thai"' in prompt
        for key in ("prepTime", "cookTime", "ingredients", "instructions", "nutrition", "tips"):
            assert key in prompt

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_missing_instructions_retries_after_delay(self, mock_sleep):
        """A schema failure on attempt 1 triggers a second attempt after 2s."""
        provider = FakeTextProvider([MISSING_INSTRUCTIONS, PIZZA_JSON])

        recipe = await RecipeGenerator(provider).generate_structured("Margherita Pizza")

        assert recipe.name == "Margherita Pizza"
        assert len(provider.prompts) == 2
        mock_sleep.assert_awaited_once_with(2)

    @pytest.mark.asyncio
    async def test_all_attempts_time_out(self):
        """Three timeouts: exactly three calls, delays 2s then 4s, then exhaustion."""
        provider = FakeTextProvider([HANG])
        generator = RecipeGenerator(provider, timeout_seconds=0.01)

        with patch(SLEEP, new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(GenerationExhaustedError) as exc_info:
                await generator.generate_structured("Margherita Pizza")

        provider.release.set()
        await asyncio.sleep(0)

        assert len(provider.prompts) == 3
        assert [c.args[0] for c in mock_sleep.await_args_list] == [2, 4]
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_error, ProviderTimeoutError)

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_exhaustion_wraps_last_error(self, mock_sleep):
        provider = FakeTextProvider([TransportError("503"), "no json here", MISSING_INSTRUCTIONS])

        with pytest.raises(GenerationExhaustedError) as exc_info:
            await RecipeGenerator(provider).generate_structured("Soup")

        assert isinstance(exc_info.value.last_error, SchemaValidationError)
        assert "3 attempts" in str(exc_info.value)

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_transport_error_then_success(self, mock_sleep):
        provider = FakeTextProvider([TransportError("connection reset"), PIZZA_JSON])

        recipe = await RecipeGenerator(provider).generate_structured("Margherita Pizza")

        assert recipe.name == "Margherita Pizza"
        mock_sleep.assert_awaited_once_with(2)

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_unexpected_adapter_error_is_retried(self, mock_sleep):
        """Raw client errors leaking out of an adapter count as transport failures."""
        provider = FakeTextProvider([RuntimeError("socket closed"), PIZZA_JSON])

        recipe = await RecipeGenerator(provider).generate_structured("Margherita Pizza")

        assert recipe.name == "Margherita Pizza"
        assert len(provider.prompts) == 2

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_custom_attempts_and_delay(self, mock_sleep):
        provider = FakeTextProvider(["nope"])

        with pytest.raises(GenerationExhaustedError):
            await RecipeGenerator(provider, max_attempts=4, base_delay=1).generate_structured("Stew")

        assert len(provider.prompts) == 4
        assert [c.args[0] for c in mock_sleep.await_args_list] == [1, 2, 4]

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_commentary_around_payload(self, mock_sleep):
        provider = FakeTextProvider([f"Sure! Here's a {{quick}} recipe:\n{PIZZA_JSON}\nBon appétit!"])

        recipe = await RecipeGenerator(provider).generate_structured("Margherita Pizza")

        assert recipe.name == "Margherita Pizza"
        mock_sleep.assert_not_called()

    @pytest.mark.asyncio
    @patch(SLEEP, new_callable=AsyncMock)
    async def test_echoed_format_hint_before_payload(self, mock_sleep):
        """A small JSON fragment in the commentary does not shadow the recipe."""
        provider = FakeTextProvider(['I used the format {"step": 1} as requested.\n' + PIZZA_JSON])

        recipe = await RecipeGenerator(provider).generate_structured("Margherita Pizza")

        assert recipe.name == "Margherita Pizza"
        assert len(provider.prompts) == 1
        mock_sleep.assert_not_called()
