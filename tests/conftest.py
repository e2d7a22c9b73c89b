"""Test configuration and fixtures."""

import os

import pytest

# Set required environment variables for tests
os.environ["ENVIRONMENT"] = "testing"

from sample_discovery.infrastructure.environment import StaticEnvironment
from sample_discovery.infrastructure.storage import InMemoryKeyValueStore
from sample_discovery.resilience.classification import ErrorClassifier
from sample_discovery.resilience.error_log import ErrorLog
from sample_discovery.resilience.health import (
    HealthTrackerConfig,
    ServiceHealthTracker,
)
from sample_discovery.resilience.retry import RetryExecutor, RetryPolicy


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingSleep:
    """Async sleep that records requested delays instead of waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def sleep():
    """Create a recording sleep."""
    return RecordingSleep()


@pytest.fixture
def environment():
    """Create an online host environment."""
    return StaticEnvironment(online=True, url="https://example.test/discover")


@pytest.fixture
def store():
    """Create an empty in-memory store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def classifier(environment):
    """Create a classifier bound to the test environment."""
    return ErrorClassifier(environment.is_online)


@pytest.fixture
def error_log(store, environment, clock):
    """Create an error log backed by the in-memory store."""
    return ErrorLog(store, environment, clock=clock)


@pytest.fixture
def health_tracker(clock):
    """Create a health tracker with the default thresholds."""
    return ServiceHealthTracker(
        HealthTrackerConfig(failure_threshold=3, health_check_interval_ms=300_000),
        clock=clock,
    )


@pytest.fixture
def fast_policy():
    """Create a retry policy with small delays."""
    return RetryPolicy(max_retries=3, base_delay_ms=10, max_delay_ms=100)


@pytest.fixture
def executor(classifier, error_log, sleep, fast_policy):
    """Create a retry executor that never really sleeps."""
    return RetryExecutor(classifier, error_log, default_policy=fast_policy, sleep=sleep)
