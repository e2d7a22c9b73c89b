"""Tests for discovery metrics."""

from prometheus_client.core import CollectorRegistry

from sample_discovery.domain.models import DataSource
from sample_discovery.observability.metrics import DiscoveryMetrics
from sample_discovery.observability.metrics.collectors import result_count


class TestDiscoveryMetrics:
    """Test metrics collection functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.metrics = DiscoveryMetrics()

    def test_metric_names(self):
        """Test the collectors register under the expected names."""
        assert self.metrics.requests_total._name == "discovery_requests"
        assert (
            self.metrics.request_duration_seconds._name
            == "discovery_request_duration_seconds"
        )
        assert self.metrics.failures_total._name == "discovery_failures"

    def test_record_request(self):
        """Test a served request is counted under its source."""
        self.metrics.record_request(
            DataSource.CACHE, 0.2, [{"id": "a"}, {"id": "b"}], "req_1_abc"
        )

        assert (
            self.metrics.get_value("discovery_requests_total", {"source": "cache"}) == 1
        )
        assert (
            self.metrics.get_value("discovery_results_total", {"source": "cache"}) == 2
        )
        assert (
            self.metrics.get_value(
                "discovery_request_duration_seconds_sum", {"source": "cache"}
            )
            == 0.2
        )

    def test_record_failure(self):
        """Test a raised request is counted by reason."""
        self.metrics.record_failure("CancelledError", 1.5)
        self.metrics.record_failure("CancelledError", 0.5)

        assert (
            self.metrics.get_value(
                "discovery_failures_total", {"reason": "CancelledError"}
            )
            == 2
        )
        assert (
            self.metrics.get_value(
                "discovery_request_duration_seconds_count", {"source": "failed"}
            )
            == 2
        )

    def test_get_stats(self):
        """Test the per-source summary."""
        self.metrics.record_request(DataSource.PRIMARY, 0.1, [1])
        self.metrics.record_request(DataSource.PRIMARY, 0.1, [1])
        self.metrics.record_request(DataSource.NONE, 0.1)
        self.metrics.record_failure("AllSourcesFailedException", 0.1)

        assert self.metrics.get_stats() == {
            "primary": 2,
            "cache": 0,
            "synthetic": 0,
            "none": 1,
            "failed": 1,
        }

    def test_unrecorded_value_is_zero(self):
        """Test reading a sample that was never recorded."""
        assert (
            self.metrics.get_value("discovery_requests_total", {"source": "primary"})
            == 0.0
        )

    def test_separate_registries(self):
        """Test two collectors do not share samples."""
        registry = CollectorRegistry()
        other = DiscoveryMetrics(registry)

        other.record_request(DataSource.SYNTHETIC, 0.1, [1])

        assert other.registry is registry
        assert other.get_stats()["synthetic"] == 1
        assert self.metrics.get_stats()["synthetic"] == 0


class TestResultCount:
    """Test result counting."""

    def test_counts(self):
        """Test sized, scalar and missing values."""
        assert result_count(None) == 0
        assert result_count([]) == 0
        assert result_count([1, 2, 3]) == 3
        assert result_count({"id": "a"}) == 1
        assert result_count("abc") == 1
        assert result_count(42) == 1
