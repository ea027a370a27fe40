"""Bounded retry with linear backoff for transient provider errors."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from thnk.llm.client import LLMError, RateLimited, ServiceOverloaded
from thnk.utils.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS: Tuple[Type[LLMError], ...] = (RateLimited, ServiceOverloaded)


@dataclass(frozen=True)
class RetryStatus:
    """Progress event emitted before each backoff sleep.

    Attributes:
        attempt: Attempt number that just failed (1-based)
        max_attempts: Total attempts allowed
        delay: Seconds until the next attempt
        error: The retryable error that caused the retry
    """

    attempt: int
    max_attempts: int
    delay: float
    error: LLMError

    @property
    def message(self) -> str:
        return (
            f"attempt {self.attempt} of {self.max_attempts}, "
            f"retrying in {self.delay:g}s"
        )


def is_retryable(error: BaseException) -> bool:
    """Return True for rate-limit and overload errors."""
    return isinstance(error, RETRYABLE_ERRORS)


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    base_delay: float = 2.0,
    on_retry: Optional[Callable[[RetryStatus], None]] = None,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> T:
    """
    Await ``operation`` up to ``max_attempts`` times.

    Only RateLimited and ServiceOverloaded are retried; any other error
    propagates at once. The delay before retry k is ``k * base_delay``
    (2s then 4s with the defaults). Sleeping is an await, so other tasks keep
    running and cancellation interrupts it.

    Args:
        operation: Zero-argument coroutine factory performing one attempt
        max_attempts: Total attempts including the first
        base_delay: Delay unit in seconds
        on_retry: Optional callback receiving a RetryStatus before each sleep
        sleep: Awaitable sleep function (default: asyncio.sleep)

    Returns:
        The first successful result

    Raises:
        RateLimited, ServiceOverloaded: The last error once attempts run out
        LLMError: Any non-retryable error from the operation
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except RETRYABLE_ERRORS as e:
            if attempt == max_attempts:
                logger.error(
                    "llm_request_failed",
                    attempts=attempt,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise

            delay = attempt * base_delay
            status = RetryStatus(
                attempt=attempt,
                max_attempts=max_attempts,
                delay=delay,
                error=e,
            )

            logger.warning(
                "llm_request_retry",
                attempt=attempt,
                max_attempts=max_attempts,
                retry_delay=delay,
                error_type=type(e).__name__,
            )

            if on_retry:
                on_retry(status)

            await (sleep or asyncio.sleep)(delay)

    raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
