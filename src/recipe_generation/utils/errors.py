"""Error taxonomy and error-handling helpers for recipe generation.

Exceptions:
- ProviderTimeoutError: deadline exceeded (also a builtin TimeoutError)
- TransportError: network failure or non-2xx response from a provider
- NoStructuredPayloadError: no JSON object found in provider text
- SchemaValidationError: required recipe field missing or empty
- GenerationExhaustedError: every text attempt failed (hard failure)

Helpers:
- safe_execute_async() / safe_execute_sync(): log-and-degrade wrappers used
  wherever a failure is soft (image pipeline, availability probes)
"""

from typing import Optional

from recipe_generation.utils.logger import logger


class RecipeGenerationError(Exception):
    """Base class for every error raised by the generation engine."""


class ProviderTimeoutError(RecipeGenerationError, TimeoutError):
    """Provider call did not complete within its deadline."""

    def __init__(self, timeout_seconds: float, operation: str = "operation") -> None:
        self.timeout_seconds = timeout_seconds
        self.operation = operation
        super().__init__(f"{operation} timed out after {timeout_seconds:g}s")


class TransportError(RecipeGenerationError, ConnectionError):
    """Provider call failed on the network or returned a non-2xx status."""

    def __init__(self, message: str, provider: str = "", status: Optional[int] = None) -> None:
        self.provider = provider
        self.status = status
        super().__init__(message)


class NoStructuredPayloadError(RecipeGenerationError, ValueError):
    """Provider text did not contain a parseable JSON object."""

    def __init__(self, raw_text: str) -> None:
        self.preview = (raw_text or "")[:200]
        super().__init__(f"No valid JSON object found in provider response: {self.preview!r}")


class SchemaValidationError(RecipeGenerationError, ValueError):
    """Parsed payload is missing required recipe fields."""

    def __init__(self, missing: list[str], detail: str = "") -> None:
        self.missing = missing
        if missing:
            message = f"Missing or empty required fields: {', '.join(missing)}"
        else:
            message = "Recipe payload failed validation"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class GenerationExhaustedError(RecipeGenerationError):
    """All text generation attempts failed."""

    def __init__(self, last_error: Optional[BaseException], attempts: int) -> None:
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(
            f"Failed to generate recipe after {attempts} attempts: {last_error}"
        )


# ============================================================================
# Error Handling Helpers
# ============================================================================


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Safely execute async operation with consistent error logging.

    Used for operations whose failure degrades the result instead of failing
    the request (image prompt derivation, availability probes, JSON
    candidate parsing).

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Freepik image search").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.

    Returns:
        Result of coroutine if successful, default_return on exception.
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return


def safe_execute_sync(
    func,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Synchronous version of safe_execute_async."""
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return
