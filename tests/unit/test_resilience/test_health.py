"""Tests for dependency health tracking."""

import pytest

from sample_discovery.domain.models import HealthState
from sample_discovery.resilience.health import (
    HealthSettings,
    HealthTrackerConfig,
    ServiceHealthTracker,
)

DEP = "primary-provider"


class TestServiceHealthTracker:
    """Test health state transitions."""

    def test_unknown_dependency_is_available(self, health_tracker):
        """Test untracked dependencies start out available."""
        health = health_tracker.get_health(DEP)

        assert health.state == HealthState.AVAILABLE
        assert health.available is True
        assert health.consecutive_failures == 0
        assert health_tracker.try_acquire(DEP) is True

    def test_degrades_at_threshold(self, health_tracker):
        """Test three consecutive failures degrade the dependency."""
        health_tracker.record_failure(DEP)
        health_tracker.record_failure(DEP)
        assert health_tracker.get_health(DEP).available is True

        health_tracker.record_failure(DEP, ConnectionError("down"))
        health = health_tracker.get_health(DEP)

        assert health.state == HealthState.DEGRADED
        assert health.available is False
        assert health.consecutive_failures == 3
        assert health.degraded_since is not None
        assert health_tracker.try_acquire(DEP) is False

    def test_success_resets_counter(self, health_tracker):
        """Test any success resets the consecutive failure count."""
        health_tracker.record_failure(DEP)
        health_tracker.record_failure(DEP)
        health_tracker.record_success(DEP)
        health_tracker.record_failure(DEP)

        health = health_tracker.get_health(DEP)
        assert health.consecutive_failures == 1
        assert health.state == HealthState.AVAILABLE

    def test_probe_after_interval(self, health_tracker, clock):
        """Test exactly one caller probes once the interval has elapsed."""
        for _ in range(3):
            health_tracker.record_failure(DEP)

        clock.advance(299_999)
        assert health_tracker.try_acquire(DEP) is False

        clock.advance(1)
        assert health_tracker.try_acquire(DEP) is True
        assert health_tracker.get_health(DEP).state == HealthState.PROBING
        assert health_tracker.get_health(DEP).available is False
        assert health_tracker.try_acquire(DEP) is False

    def test_probe_success_restores(self, health_tracker, clock):
        """Test a successful probe makes the dependency available again."""
        for _ in range(3):
            health_tracker.record_failure(DEP)
        clock.advance(300_000)
        health_tracker.try_acquire(DEP)

        health_tracker.record_success(DEP)
        health = health_tracker.get_health(DEP)

        assert health.state == HealthState.AVAILABLE
        assert health.consecutive_failures == 0
        assert health.degraded_since is None
        assert health_tracker.try_acquire(DEP) is True

    def test_probe_failure_restarts_interval(self, health_tracker, clock):
        """Test a failed probe degrades again with a fresh timestamp."""
        for _ in range(3):
            health_tracker.record_failure(DEP)
        clock.advance(300_000)
        health_tracker.try_acquire(DEP)

        health_tracker.record_failure(DEP)
        health = health_tracker.get_health(DEP)

        assert health.state == HealthState.DEGRADED
        assert health.degraded_since == clock.now
        assert health_tracker.try_acquire(DEP) is False

        clock.advance(300_000)
        assert health_tracker.try_acquire(DEP) is True

    def test_release_trial_returns_to_degraded(self, health_tracker, clock):
        """Test an abandoned trial call frees the slot for a later caller."""
        for _ in range(3):
            health_tracker.record_failure(DEP)
        clock.advance(300_000)
        assert health_tracker.try_acquire(DEP) is True

        clock.advance(5)
        health_tracker.release_trial(DEP)
        health = health_tracker.get_health(DEP)

        assert health.state == HealthState.DEGRADED
        assert health.degraded_since == clock.now
        assert health.consecutive_failures == 3
        assert health_tracker.try_acquire(DEP) is False

        clock.advance(300_000)
        assert health_tracker.try_acquire(DEP) is True

    def test_release_trial_ignores_other_states(self, health_tracker):
        """Test releasing is a no-op unless a trial call is in flight."""
        health_tracker.release_trial(DEP)
        assert health_tracker.get_health(DEP).state == HealthState.AVAILABLE

        for _ in range(3):
            health_tracker.record_failure(DEP)
        degraded_since = health_tracker.get_health(DEP).degraded_since

        health_tracker.release_trial(DEP)
        assert health_tracker.get_health(DEP).degraded_since == degraded_since

    def test_dependencies_are_independent(self, health_tracker):
        """Test failures of one dependency do not affect another."""
        for _ in range(3):
            health_tracker.record_failure(DEP)

        assert health_tracker.try_acquire("cache-service") is True
        assert health_tracker.overall_status() == "degraded"

    def test_health_report(self, health_tracker, clock):
        """Test the report shape."""
        health_tracker.record_success("cache-service")
        for _ in range(3):
            health_tracker.record_failure(DEP)

        report = health_tracker.get_health_report()

        assert report[DEP] == {"available": False, "failureCount": 3, "state": "degraded"}
        assert report["cache-service"]["available"] is True
        assert report["overall"] == "degraded"
        assert report["lastUpdated"] == clock.now

    def test_overall_status(self, health_tracker):
        """Test overall status aggregation."""
        assert health_tracker.overall_status() == "healthy"

        for _ in range(3):
            health_tracker.record_failure(DEP)
        assert health_tracker.overall_status() == "unhealthy"

    def test_reset(self, health_tracker):
        """Test resetting tracked state."""
        for _ in range(3):
            health_tracker.record_failure(DEP)

        health_tracker.reset(DEP)
        assert health_tracker.try_acquire(DEP) is True

        health_tracker.record_failure("other")
        health_tracker.reset()
        assert health_tracker.get_health_report()["overall"] == "healthy"

    def test_custom_threshold(self, clock):
        """Test a custom failure threshold."""
        tracker = ServiceHealthTracker(
            HealthTrackerConfig(failure_threshold=1), clock=clock
        )
        tracker.record_failure(DEP)
        assert tracker.get_health(DEP).state == HealthState.DEGRADED


class TestHealthSettings:
    """Test health settings."""

    def test_defaults(self):
        """Test default thresholds."""
        config = HealthSettings().get_config()

        assert config.failure_threshold == 3
        assert config.health_check_interval_ms == 300_000

    def test_invalid_threshold(self):
        """Test the threshold must be positive."""
        with pytest.raises(ValueError):
            HealthTrackerConfig(failure_threshold=0)
