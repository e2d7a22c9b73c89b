"""Observability: structured logging with request correlation, and metrics."""
