"""Observability: in-memory metrics. No external SaaS."""

from cms.observability.metrics import MetricsCollector

__all__ = ["MetricsCollector"]
