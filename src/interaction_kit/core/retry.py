from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Coroutine, ParamSpec, TypeVar, cast

from tenacity import (
    RetryCallState,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import TransientError

P = ParamSpec("P")
T = TypeVar("T")

logger = logging.getLogger(__name__)


def wait_retry_after_or_exponential(
    base_wait: float, max_wait: float
) -> Callable[[RetryCallState], float]:
    """Prefer a server supplied ``retry_after`` hint, else back off exponentially."""
    exponential = wait_exponential(multiplier=base_wait, max=max_wait, exp_base=2)

    def _wait(retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        exc = outcome.exception() if outcome is not None else None
        retry_after = getattr(exc, "retry_after", None)
        if isinstance(retry_after, (int, float)) and retry_after >= 0:
            return float(min(retry_after, max_wait))
        return float(exponential(retry_state))

    return _wait


def retry_transient(
    max_attempts: int = 5,
    base_wait: float = 1.0,
    max_wait: float = 60.0,
) -> Callable[
    [Callable[P, Coroutine[Any, Any, T]]], Callable[P, Coroutine[Any, Any, T]]
]:
    """
    Decorator for retrying transient errors with exponential backoff.

    Args:
        max_attempts: Total attempts including the first call (default: 5)
        base_wait: Base wait time in seconds before exponential backoff (default: 1.0)
        max_wait: Maximum wait time in seconds between retries (default: 60.0)

    Returns:
        A decorator that wraps async functions with retry logic. Exceptions
        carrying a ``retry_after`` attribute wait exactly that long (capped
        by ``max_wait``).

    Raises:
        The last TransientError once all attempts are exhausted.
    """

    def decorator(
        func: Callable[P, Coroutine[Any, Any, T]],
    ) -> Callable[P, Coroutine[Any, Any, T]]:
        @wraps(func)
        @retry(
            stop=stop_after_attempt(max(max_attempts, 1)),
            wait=wait_retry_after_or_exponential(base_wait, max_wait),
            retry=retry_if_exception_type(TransientError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return cast(T, await func(*args, **kwargs))

        return wrapper

    return decorator
