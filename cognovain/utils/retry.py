import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from cognovain.errors import NON_RETRYABLE_ERRORS, UpstreamError, UpstreamExhaustedRetries
from cognovain.utils.logger import logger

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Awaits `operation` up to `max_retries` times with exponential backoff.

    Waits `base_delay * 2**attempt` seconds between attempts (never after the
    last one). Quota, access and content errors are raised on the spot;
    other upstream failures are retried and end in `UpstreamExhaustedRetries`.
    """
    last_error: Optional[BaseException] = None

    for attempt in range(max_retries):
        try:
            return await operation()
        except NON_RETRYABLE_ERRORS:
            raise
        except UpstreamError as e:
            logger.warning(f"Attempt {attempt + 1}/{max_retries} failed: {str(e)}")
            last_error = e

        if attempt < max_retries - 1:
            await sleep(base_delay * (2 ** attempt))

    logger.error(f"Giving up after {max_retries} attempts: {str(last_error)}")
    raise UpstreamExhaustedRetries(max_retries, last_error)
