"""Bounded retry helper with a fixed cooldown between attempts.

Wraps tenacity's ``AsyncRetrying`` so callers get a :class:`RetryOutcome`
back instead of having to juggle loop counters and success flags.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from docbot.util.logger import get_logger

logger = get_logger("retry")

T = TypeVar("T")


@dataclass(slots=True)
class RetryOutcome(Generic[T]):
    """Result of a retried call.

    Attributes:
        value: Return value of the successful attempt, ``None`` on failure.
        attempts: Number of attempts actually made.
        error: Exception raised by the last attempt when every attempt failed.
    """
    value: T | None
    attempts: int
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


async def call_with_fixed_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    retries: int,
    delay_seconds: float,
    operation_name: str = "operation",
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> RetryOutcome[T]:
    """Run ``operation`` until it succeeds or ``retries + 1`` attempts are spent.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt.
        retries: Retries allowed after the first attempt.
        delay_seconds: Fixed cooldown between attempts (no backoff).
        operation_name: Label used in log messages.
        sleep: Awaitable sleep function, injectable for tests.

    Returns:
        RetryOutcome carrying either the value or the last error.
    """
    attempts = 0
    retrying = AsyncRetrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_fixed(delay_seconds),
        retry=retry_if_exception_type(Exception),
        before_sleep=before_sleep_log(logger, logging.DEBUG),
        sleep=sleep,
        reraise=False,
    )

    try:
        async for attempt in retrying:
            with attempt:
                attempts = attempt.retry_state.attempt_number
                value = await operation()
    except RetryError as exc:
        last_error = exc.last_attempt.exception()
        logger.warning(
            "[RETRY] %s failed after %d attempts: %s",
            operation_name, attempts, last_error,
        )
        return RetryOutcome(value=None, attempts=attempts, error=last_error)

    return RetryOutcome(value=value, attempts=attempts)
