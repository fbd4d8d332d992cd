"""Retry with exponential backoff for registry lookups.

``retry_with_backoff`` takes the operation, a ``RetryPolicy`` and a
retryability predicate. The delay between attempts is awaited through an
injectable ``sleep`` coroutine so concurrent resolutions keep running and tests
can observe the schedule without waiting.
"""

from __future__ import annotations

import asyncio
import errno
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterator, Optional, TypeVar

import aiohttp

from ..constants import Constants
from ..errors import RegistryHTTPError
from .logging_utils import extra_context

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and delay schedule, delays in seconds."""

    max_attempts: int = Constants.RETRY_MAX_ATTEMPTS
    initial_delay: float = Constants.RETRY_INITIAL_DELAY_SEC
    max_delay: float = Constants.RETRY_MAX_DELAY_SEC
    backoff_multiplier: float = Constants.RETRY_BACKOFF_MULTIPLIER

    @classmethod
    def from_constants(cls) -> "RetryPolicy":
        """Build a policy from the current (possibly overridden) Constants."""
        return cls(
            max_attempts=Constants.RETRY_MAX_ATTEMPTS,
            initial_delay=Constants.RETRY_INITIAL_DELAY_SEC,
            max_delay=Constants.RETRY_MAX_DELAY_SEC,
            backoff_multiplier=Constants.RETRY_BACKOFF_MULTIPLIER,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based), capped at max_delay."""
        return min(self.initial_delay * (self.backoff_multiplier ** (attempt - 1)), self.max_delay)

    def delays(self) -> Iterator[float]:
        """Delays between consecutive attempts; one fewer than max_attempts."""
        for attempt in range(1, self.max_attempts):
            yield self.delay_for(attempt)


def _error_code(error: BaseException) -> Optional[str]:
    """Symbolic network error code, from a ``code`` attribute or an errno."""
    code = getattr(error, "code", None)
    if isinstance(code, str):
        return code
    errno_value = getattr(error, "errno", None)
    if errno_value is None:
        os_error = getattr(error, "os_error", None)
        errno_value = getattr(os_error, "errno", None)
    if isinstance(errno_value, int):
        return errno.errorcode.get(errno_value)
    return None


def _status_code(error: BaseException) -> Optional[int]:
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    return None


def is_retryable_error(error: BaseException) -> bool:
    """Return True for transient transport failures worth another attempt."""
    if _error_code(error) in Constants.RETRYABLE_ERROR_CODES:
        return True

    if _status_code(error) in Constants.RETRYABLE_STATUS_CODES:
        return True

    # Timeouts, whatever raised them
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return True
    if type(error).__name__ == "TimeoutError":
        return True
    # Status errors embed the URL in their message
    if not isinstance(error, RegistryHTTPError) and "timeout" in str(error).lower():
        return True

    # Generic network failures
    if isinstance(error, aiohttp.ClientConnectionError):
        return True
    if type(error).__name__ == "NetworkError" or getattr(error, "type", None) == "network":
        return True

    return False


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    *,
    is_retryable: Callable[[BaseException], bool] = is_retryable_error,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    context: Optional[Dict[str, Any]] = None,
) -> T:
    """Await ``fn`` until it succeeds, retrying transient failures.

    Non-retryable errors are raised on the attempt they occur; when attempts
    run out the last error is raised.
    """
    policy = policy or RetryPolicy.from_constants()
    context = context or {}
    max_attempts = max(1, policy.max_attempts)
    schedule = policy.delays()

    attempt = 1
    while True:
        try:
            return await fn()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            delay = next(schedule, None) if is_retryable(exc) else None
            if delay is None:
                raise

            logger.debug(
                "Retrying registry fetch after transient failure (attempt %d/%d)",
                attempt,
                max_attempts,
                extra=extra_context(
                    event="retry",
                    component="retry",
                    attempt=attempt,
                    max_attempts=max_attempts,
                    delay_sec=delay,
                    error=str(exc),
                    error_code=_error_code(exc),
                    status_code=_status_code(exc),
                    **context,
                ),
            )
            await sleep(delay)
            attempt += 1
