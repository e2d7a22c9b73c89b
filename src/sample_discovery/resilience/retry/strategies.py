"""Retry strategies and algorithms."""

import random
from abc import ABC, abstractmethod

from tenacity import RetryCallState
from tenacity.wait import wait_base

from .config import RetryPolicy


class RetryStrategy(ABC):
    """Abstract base class for retry strategies."""

    @abstractmethod
    def calculate_delay(self, attempt: int, policy: RetryPolicy) -> float:
        """Calculate delay in milliseconds after the zero-based ``attempt``."""
        pass


class ExponentialBackoffStrategy(RetryStrategy):
    """Exponential backoff with uniform jitter.

    The exponential term ``base * 2**attempt`` is capped at ``max_delay_ms``
    and then spread uniformly over ``[e * (1 - j), e * (1 + j)]``. The result
    never exceeds ``max_delay_ms * (1 + j)``.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def calculate_delay(self, attempt: int, policy: RetryPolicy) -> float:
        if attempt < 0:
            raise ValueError("attempt must be non-negative")

        exponential = min(policy.base_delay_ms * (2**attempt), policy.max_delay_ms)

        jitter = policy.jitter_ratio
        delay = self.rng.uniform(exponential * (1 - jitter), exponential * (1 + jitter))

        return min(delay, policy.max_delay_ms * (1 + jitter))


class wait_strategy(wait_base):
    """Tenacity wait adapter: converts a strategy delay to seconds."""

    def __init__(self, strategy: RetryStrategy, policy: RetryPolicy):
        self.strategy = strategy
        self.policy = policy

    def __call__(self, retry_state: RetryCallState) -> float:
        # attempt_number is 1-based and counts the attempt that just failed
        attempt = retry_state.attempt_number - 1
        return self.strategy.calculate_delay(attempt, self.policy) / 1000.0
