import asyncio
import functools
import logging
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# requests raises subclasses of OSError for connection failures and timeouts
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (ConnectionError, TimeoutError, OSError)


def retry_soco(
    max_retries: int = 1,
    delay: float = 1.0,
    retry_on: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
) -> Callable:
    """Retry decorator for transient network failures talking to a speaker.

    A UPnP fault returned by the device is an answer rather than a transient
    failure and propagates on the first attempt.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            attempts = max_retries + 1
            for attempt in range(1, attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as exc:
                    if attempt == attempts:
                        raise
                    logger.warning("Retrying %s (attempt %d/%d): %s", func.__name__, attempt, max_retries, exc)
                    await asyncio.sleep(delay)
            raise AssertionError("unreachable")

        return wrapper

    return decorator
