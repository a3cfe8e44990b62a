"""Retry decorator built on tenacity."""

from collections.abc import Awaitable, Callable

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from inkwell.monitoring import get_logger

logger = get_logger(__name__)

RETRIABLE_EXCEPTIONS = (RedisConnectionError, RedisTimeoutError, ConnectionError, TimeoutError)


def _log_before_sleep(max_retries: int) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Retrying call",
            function=retry_state.fn.__name__ if retry_state.fn else "unknown",
            attempt=retry_state.attempt_number,
            max_retries=max_retries,
            delay=retry_state.next_action.sleep if retry_state.next_action else 0,
            error=str(exception),
        )

    return before_sleep


def with_retry[**P, T](
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    exec_retry: type[Exception] | tuple[type[Exception], ...] = RETRIABLE_EXCEPTIONS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async function with exponential backoff.

    Args:
        max_retries: Maximum number of attempts.
        base_delay: Initial delay between attempts in seconds.
        max_delay: Maximum delay between attempts in seconds.
        exec_retry: Exception type(s) that trigger a retry.

    Returns:
        Decorator; the last exception is re-raised once attempts run out.
    """
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=_log_before_sleep(max_retries),
        reraise=True,
    )
