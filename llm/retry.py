"""
Exponential backoff retry helper.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[Any]],
    max_attempts: int = 3,
    initial_delay_ms: int = 1000,
    sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
) -> Any:
    """
    Await ``operation()`` and retry it on failure with exponential backoff.

    ``max_attempts`` counts retries after the first call, so an operation that
    always fails is called ``max_attempts + 1`` times. The delay starts at
    ``initial_delay_ms`` and doubles after every retry, without jitter. When no
    retries remain the last error is re-raised unchanged.

    Args:
        operation: Zero-argument coroutine factory
        max_attempts: Number of retries left
        initial_delay_ms: Delay before the next retry, in milliseconds
        sleep: Awaitable sleep taking seconds (defaults to asyncio.sleep)

    Returns:
        Result of the first successful call
    """
    sleep = sleep or asyncio.sleep
    try:
        return await operation()
    except Exception:
        if max_attempts <= 0:
            raise
        logger.info(f"Retrying in {initial_delay_ms}ms... ({max_attempts} retries left)")
        await sleep(initial_delay_ms / 1000)
        return await retry_with_backoff(
            operation,
            max_attempts=max_attempts - 1,
            initial_delay_ms=initial_delay_ms * 2,
            sleep=sleep,
        )
