"""Prometheus metrics for discovery requests."""

from .collectors import DiscoveryMetrics

__all__ = ["DiscoveryMetrics"]
