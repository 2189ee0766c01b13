"""
Retry utilities for the HTTP transport.

Exponential backoff with jitter for transient network failures. Only the
transport layer retries; the preparation pipeline never does.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from swisstronik.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Example:
        ```python
        config = RetryConfig(
            max_attempts=5,
            base_delay_ms=200,
            retryable_errors=(httpx.TransportError,),
        )
        ```
    """

    max_attempts: int = 3
    """Total number of attempts, including the first one."""

    base_delay_ms: int = 200
    """Base delay in milliseconds for exponential backoff."""

    max_delay_ms: int = 5000
    """Maximum delay in milliseconds (cap for exponential growth)."""

    jitter: bool = True
    """Whether to add random jitter to delays."""

    exponential_base: float = 2.0
    """Base for exponential backoff calculation."""

    retryable_errors: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (ConnectionError, TimeoutError)
    )
    """Exception types that trigger a retry."""

    should_retry: Optional[Callable[[Exception], bool]] = None
    """Optional extra filter applied to retryable errors."""


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay with exponential backoff and optional jitter.

    Args:
        attempt: Zero-based attempt number (0 = first retry)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay_ms = config.base_delay_ms * (config.exponential_base ** attempt)
    delay_ms = min(delay_ms, config.max_delay_ms)

    if config.jitter:
        # Full jitter
        delay_ms = random.uniform(0, delay_ms)

    return delay_ms / 1000


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
) -> T:
    """
    Execute an async function with retry logic.

    Errors that are not in ``config.retryable_errors``, or that the
    ``should_retry`` filter rejects, propagate immediately.

    Args:
        fn: Async function to execute (no arguments)
        config: Retry configuration (uses defaults if None)

    Returns:
        Result of the function

    Raises:
        The last error once all attempts are exhausted.
    """
    config = config or RetryConfig()
    if config.max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(config.max_attempts):
        try:
            return await fn()
        except config.retryable_errors as e:
            if config.should_retry is not None and not config.should_retry(e):
                raise
            if attempt == config.max_attempts - 1:
                raise

            delay = calculate_delay(attempt, config)
            _logger.debug(
                "Retrying after transient failure",
                extra={"attempt": attempt + 1, "delay_s": delay, "error": type(e).__name__},
            )
            await asyncio.sleep(delay)

    raise RuntimeError("Retry exhausted without error")
