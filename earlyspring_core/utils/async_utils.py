"""
Async utilities for earlyspring-core.

Provides helpers for async/await operations.
"""

import asyncio
from typing import Any, Coroutine, Optional, Set, TypeVar

from earlyspring_core.utils.logging import get_logger, log_error

T = TypeVar("T")

logger = get_logger(__name__)


async def run_with_timeout(
    coro: Coroutine[Any, Any, T],
    timeout: float,
    default: Optional[T] = None,
) -> Optional[T]:
    """
    Run a coroutine with a timeout.

    Args:
        coro: Coroutine to run
        timeout: Timeout in seconds
        default: Default value to return on timeout

    Returns:
        Coroutine result or default value

    Example:
        >>> summary = await run_with_timeout(weather.get_current_weather_summary(), timeout=5.0)
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError:
        return default


def spawn(
    coro: Coroutine[Any, Any, Any],
    registry: Set["asyncio.Task[Any]"],
    name: Optional[str] = None,
) -> "asyncio.Task[Any]":
    """
    Start a background task and keep a strong reference to it.

    The task removes itself from ``registry`` when it finishes. Exceptions
    escaping the coroutine are logged rather than left for the loop's
    "exception was never retrieved" warning.

    Args:
        coro: Coroutine to run
        registry: Set holding live task references
        name: Optional task name

    Returns:
        The created task
    """
    task = asyncio.get_running_loop().create_task(coro, name=name)
    registry.add(task)

    def _done(finished: "asyncio.Task[Any]") -> None:
        registry.discard(finished)
        if finished.cancelled():
            return
        exc = finished.exception()
        if exc is not None:
            logger.error("background_task_failed", task=finished.get_name(), **log_error(exc))

    task.add_done_callback(_done)
    return task


async def cancel_tasks(*tasks: "asyncio.Task[Any]") -> None:
    """
    Cancel multiple tasks gracefully.

    Args:
        *tasks: Tasks to cancel

    Example:
        >>> await cancel_tasks(task1, task2, task3)
    """
    for task in tasks:
        if not task.done():
            task.cancel()

    await asyncio.gather(*tasks, return_exceptions=True)
