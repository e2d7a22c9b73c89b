"""Retry decorators for provider calls."""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .config import RetryPolicy
from .executor import Fallback, RetryExecutor

T = TypeVar("T")


def retry_decorator(
    executor: RetryExecutor,
    policy: RetryPolicy | None = None,
    fallback: Fallback[Any] | None = None,
    context: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Create a retry decorator backed by ``executor``.

    Args:
        executor: Executor that runs the retry loop and logs failures
        policy: Retry policy (defaults to the executor's default policy)
        fallback: Called with the final error when retries run out
        context: Label for logs and error records (defaults to the function name)

    Returns:
        Decorator function
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        label = context or func.__name__

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await executor.with_retry(
                lambda: func(*args, **kwargs),
                policy,
                fallback,
                context=label,
            )

        return wrapper

    return decorator
