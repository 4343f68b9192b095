"""Deadline wrapper for provider calls.

with_timeout() races an awaitable against a deadline. The awaitable runs as a
detached task: when the deadline wins, the task is left running and its
eventual result (or exception) is retrieved and discarded. It is never
cancelled, so side effects of a timed-out provider call may still complete
later. No retries happen here; retrying is the caller's job.
"""

import asyncio
from typing import Awaitable, TypeVar

from recipe_generation.utils.errors import ProviderTimeoutError
from recipe_generation.utils.logger import logger

T = TypeVar("T")

# Strong references to detached tasks until they finish (the event loop only
# keeps weak references)
_detached_tasks: set[asyncio.Future] = set()


def _discard_result(task: asyncio.Future) -> None:
    _detached_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Detached provider call finished after its deadline with error: {exc}")
    else:
        logger.debug("Detached provider call finished after its deadline; result discarded")


async def with_timeout(
    operation: Awaitable[T],
    timeout_seconds: float,
    operation_name: str = "Provider call",
) -> T:
    """Await `operation`, failing with ProviderTimeoutError after `timeout_seconds`.

    Args:
        operation: Coroutine or future to run.
        timeout_seconds: Deadline in seconds.
        operation_name: Label used in the error message.

    Returns:
        The operation's result if it finished in time.

    Raises:
        ProviderTimeoutError: If the deadline passed first.
        Exception: Whatever the operation raised, if it finished in time.
    """
    task = asyncio.ensure_future(operation)
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_seconds)
    except asyncio.CancelledError:
        _detached_tasks.add(task)
        task.add_done_callback(_discard_result)
        raise

    if task in done:
        return task.result()

    # Deadline won: detach the task and ignore whatever it produces
    _detached_tasks.add(task)
    task.add_done_callback(_discard_result)
    raise ProviderTimeoutError(timeout_seconds, operation_name)
