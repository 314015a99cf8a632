"""Retry logic with exponential backoff for commitstreak."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from commitstreak.config.settings import RetrySettings
from commitstreak.errors.classify import classify
from commitstreak.errors.classify import is_retryable_error
from commitstreak.errors.types import RETRYABLE_KINDS
from commitstreak.errors.types import ErrorKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    backoff_factor: float = 2.0
    retryable_kinds: frozenset[ErrorKind] = RETRYABLE_KINDS

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> "RetryConfig":
        return cls(
            max_retries=max(0, settings.max_retries),
            base_delay=settings.base_delay,
            max_delay=settings.max_delay,
            backoff_factor=settings.backoff_factor,
        )


def calculate_retry_delay(attempt: int, config: RetryConfig) -> float:
    """Calculate delay before next retry using exponential backoff.

    Deterministic: no jitter is applied.

    Args:
        attempt: Which attempt just failed (0-indexed)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay = config.base_delay * (config.backoff_factor**attempt)
    return min(delay, config.max_delay)


def should_retry_exception(exc: Exception, config: RetryConfig | None = None) -> bool:
    """Determine if an exception should trigger a retry.

    An error is retried when its classified kind is retryable, or when the
    structural check recognizes a transient failure.
    """
    config = config or RetryConfig()
    return classify(exc) in config.retryable_kinds or is_retryable_error(exc)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
) -> T:
    """Execute an async operation with retry logic.

    Args:
        operation: Callable returning a fresh awaitable for each attempt
        config: Retry configuration (uses defaults if None)

    Returns:
        Result of the operation

    Raises:
        The last exception, unchanged, once retries are exhausted or as soon
        as a non-retryable error occurs
    """
    if config is None:
        config = RetryConfig()

    total_attempts = config.max_retries + 1

    for attempt in range(total_attempts):
        try:
            result = await operation()
        except Exception as e:
            retryable = should_retry_exception(e, config)
            if not retryable or attempt >= config.max_retries:
                logger.debug(
                    "Operation failed after %d attempt(s) (retryable=%s): %s",
                    attempt + 1,
                    retryable,
                    e,
                )
                raise

            delay = calculate_retry_delay(attempt, config)
            logger.warning(
                "Operation failed (%s), retrying in %.1fs (attempt %d/%d)",
                classify(e),
                delay,
                attempt + 1,
                total_attempts,
            )
            await asyncio.sleep(delay)
        else:
            if attempt > 0:
                logger.info("Operation succeeded after %d attempts", attempt + 1)
            return result

    raise RuntimeError("Unexpected state in retry loop")
