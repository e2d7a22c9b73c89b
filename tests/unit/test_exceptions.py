"""Tests for the exception hierarchy."""

from sample_discovery.domain.exceptions import DiscoveryException, ProviderError
from sample_discovery.domain.models import ErrorCode
from sample_discovery.resilience.classification import classify
from sample_discovery.resilience.exceptions import (
    AllSourcesFailedException,
    DependencyDegradedException,
    ResilienceException,
)


class TestExceptions:
    """Test exception attributes."""

    def test_provider_error(self):
        """Test provider errors keep their status."""
        error = ProviderError("Quota exceeded", status=403, provider="youtube")

        assert isinstance(error, DiscoveryException)
        assert str(error) == "Quota exceeded"
        assert error.status == 403
        assert error.error_code == ErrorCode.EXTERNAL_SERVICE_ERROR
        assert error.details == {"provider": "youtube", "status": 403}

    def test_dependency_degraded(self):
        """Test the short-circuit reason."""
        error = DependencyDegradedException("primary-provider", "req_1_abc")

        assert isinstance(error, ResilienceException)
        assert error.dependency_name == "primary-provider"
        assert error.error_code == ErrorCode.DEPENDENCY_DEGRADED
        assert error.correlation_id == "req_1_abc"

    def test_all_sources_failed_user_message(self):
        """Test the user message follows the classification."""
        classification = classify("quota exceeded")
        last_error = RuntimeError("generator broke")

        error = AllSourcesFailedException("primary-provider", classification, last_error)

        assert error.user_message == classification.user_message
        assert error.details["last_error"] == "generator broke"
        assert error.error_code == ErrorCode.FALLBACK_FAILED

    def test_all_sources_failed_default_message(self):
        """Test the generic message without a classification."""
        error = AllSourcesFailedException("primary-provider")

        assert error.user_message == "Sample discovery is temporarily unavailable."
        assert error.details["last_error"] is None
