"""Per-dependency health tracking with fast-fail and single-caller probing."""

from dataclasses import dataclass
from typing import Any

import structlog

from sample_discovery.domain.models import HealthState, ServiceHealthState

from ..clock import Clock, now_ms
from .config import HealthTrackerConfig

logger = structlog.get_logger()


@dataclass
class DependencyHealth:
    """Mutable health record for one dependency."""

    dependency_name: str
    state: HealthState = HealthState.AVAILABLE
    consecutive_failures: int = 0
    last_success_at: int | None = None
    last_failure_at: int | None = None
    degraded_since: int | None = None

    def snapshot(self) -> ServiceHealthState:
        return ServiceHealthState(
            dependency_name=self.dependency_name,
            state=self.state,
            consecutive_failures=self.consecutive_failures,
            last_success_at=self.last_success_at,
            last_failure_at=self.last_failure_at,
            degraded_since=self.degraded_since,
        )


class ServiceHealthTracker:
    """Tracks dependency health and short-circuits calls to degraded ones.

    States per dependency:

    - ``AVAILABLE``: calls go through. Reaching ``failure_threshold``
      consecutive failures moves to ``DEGRADED``.
    - ``DEGRADED``: calls are refused until ``health_check_interval_ms`` has
      passed since ``degraded_since``. The first caller after that moves the
      dependency to ``PROBING`` and is let through.
    - ``PROBING``: every other caller is refused. A success returns to
      ``AVAILABLE``; a failure returns to ``DEGRADED`` with a fresh
      ``degraded_since``.

    Mutations happen between awaits on a single event loop, so no locking.
    """

    def __init__(
        self,
        config: HealthTrackerConfig | None = None,
        clock: Clock = now_ms,
    ):
        self.config = config or HealthTrackerConfig()
        self.clock = clock
        self._dependencies: dict[str, DependencyHealth] = {}
        self._last_updated: int | None = None

    def _get(self, dependency: str) -> DependencyHealth:
        if dependency not in self._dependencies:
            self._dependencies[dependency] = DependencyHealth(dependency)
        return self._dependencies[dependency]

    def _transition(self, health: DependencyHealth, state: HealthState) -> None:
        previous = health.state
        health.state = state

        logger.info(
            "Dependency health state changed",
            dependency=health.dependency_name,
            from_state=previous.value,
            to_state=state.value,
            consecutive_failures=health.consecutive_failures,
        )

    def record_success(self, dependency: str) -> None:
        """Record a successful call. Always resets the failure counter."""
        health = self._get(dependency)
        now = self.clock()

        health.consecutive_failures = 0
        health.last_success_at = now
        health.degraded_since = None
        self._last_updated = now

        if health.state != HealthState.AVAILABLE:
            self._transition(health, HealthState.AVAILABLE)

    def record_failure(self, dependency: str, error: Any = None) -> None:
        """Record a failed call."""
        health = self._get(dependency)
        now = self.clock()

        health.consecutive_failures += 1
        health.last_failure_at = now
        self._last_updated = now

        if health.state == HealthState.PROBING:
            health.degraded_since = now
            self._transition(health, HealthState.DEGRADED)
            logger.warning(
                "Probe failed, dependency stays degraded",
                dependency=dependency,
                error=str(error) if error is not None else None,
            )
        elif (
            health.state == HealthState.AVAILABLE
            and health.consecutive_failures >= self.config.failure_threshold
        ):
            health.degraded_since = now
            self._transition(health, HealthState.DEGRADED)
            logger.warning(
                "Dependency degraded due to failure threshold",
                dependency=dependency,
                consecutive_failures=health.consecutive_failures,
                threshold=self.config.failure_threshold,
                error=str(error) if error is not None else None,
            )

    def release_trial(self, dependency: str) -> None:
        """Return an abandoned trial call to ``DEGRADED``.

        Used when the single call let through ends without an outcome
        (cancelled, for instance). The check interval restarts from now; the
        failure counter is left alone.
        """
        health = self._dependencies.get(dependency)
        if health is None or health.state != HealthState.PROBING:
            return

        health.degraded_since = self.clock()
        self._last_updated = health.degraded_since
        self._transition(health, HealthState.DEGRADED)
        logger.warning(
            "Trial call abandoned, dependency stays degraded", dependency=dependency
        )

    def try_acquire(self, dependency: str) -> bool:
        """Whether the caller may attempt the dependency right now.

        A degraded dependency whose check interval has elapsed is moved to
        ``PROBING`` and exactly this caller is allowed through.
        """
        health = self._get(dependency)

        if health.state == HealthState.AVAILABLE:
            return True

        if health.state == HealthState.PROBING:
            return False

        elapsed = self.clock() - (health.degraded_since or 0)
        if elapsed >= self.config.health_check_interval_ms:
            self._transition(health, HealthState.PROBING)
            return True

        return False

    def get_health(self, dependency: str) -> ServiceHealthState:
        """Snapshot of ``dependency``'s health."""
        health = self._dependencies.get(dependency)
        if health is None:
            return ServiceHealthState(dependency_name=dependency)
        return health.snapshot()

    def get_health_report(self) -> dict[str, Any]:
        """Health report for UI and ops tooling."""
        report: dict[str, Any] = {
            name: {
                "available": health.state == HealthState.AVAILABLE,
                "failureCount": health.consecutive_failures,
                "state": health.state.value,
            }
            for name, health in self._dependencies.items()
        }
        report["overall"] = self.overall_status()
        report["lastUpdated"] = self._last_updated or self.clock()
        return report

    def overall_status(self) -> str:
        """``healthy`` if all tracked dependencies are available, ``unhealthy``
        if none are, ``degraded`` otherwise."""
        if not self._dependencies:
            return "healthy"

        available = sum(
            1 for h in self._dependencies.values() if h.state == HealthState.AVAILABLE
        )
        if available == len(self._dependencies):
            return "healthy"
        if available > 0:
            return "degraded"
        return "unhealthy"

    def reset(self, dependency: str | None = None) -> None:
        """Forget tracked state for one dependency, or for all of them."""
        if dependency is None:
            self._dependencies.clear()
            logger.info("Health tracker reset")
        else:
            self._dependencies.pop(dependency, None)
            logger.info("Dependency health reset", dependency=dependency)
