"""
Retry logic with backoff.

Decorator for automatic retry on retryable errors. Which errors are retried is
decided by exception type, so call sites classify failures by raising the
right subclass instead of branching on status codes.
"""

import asyncio
import functools
from typing import Any, Awaitable, Callable, Tuple, Type, TypeVar

from shared.errors import RetryableError
from shared.logging import get_logger

T = TypeVar("T")
logger = get_logger("retry")


def retry_with_backoff(
    max_attempts: int = 3,
    base_delay: float = 2,
    retryable_exceptions: Tuple[Type[BaseException], ...] = (RetryableError,),
    exponential: bool = True,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
):
    """
    Decorator for retrying coroutine functions with backoff.

    Args:
        max_attempts: Maximum number of attempts including the first (default: 3)
        base_delay: Delay in seconds before the first retry (default: 2)
        retryable_exceptions: Exception types that trigger a retry (default: RetryableError)
        exponential: Double the delay after every retry; fixed delay when False
        sleep: Awaitable sleep used between attempts, replaceable in tests

    Returns:
        Decorated coroutine function

    Example:
        @retry_with_backoff(max_attempts=2, base_delay=2, retryable_exceptions=(RateLimitError,))
        async def call_api():
            return await client.post(...)
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except retryable_exceptions as e:
                    if attempt >= max_attempts - 1:
                        logger.warning(
                            f"All {max_attempts} attempts failed for {func.__name__}",
                            extra={"error": str(e)},
                        )
                        raise
                    # Exponential: d, 2d, 4d ... ; fixed: d, d, d ...
                    delay = base_delay * (2 ** attempt) if exponential else base_delay
                    logger.warning(
                        f"Retry attempt {attempt + 1}/{max_attempts} for {func.__name__} "
                        f"after {delay}s delay",
                        extra={"error": str(e), "attempt": attempt + 1},
                    )
                    await sleep(delay)
            # Unreachable: the loop either returns or re-raises
            raise RuntimeError(f"Function {func.__name__} failed after {max_attempts} attempts")

        return async_wrapper

    return decorator
