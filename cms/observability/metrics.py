"""Prometheus-style metrics collector. Thread-safe, in-memory. No real Prometheus dependency."""

import threading
from typing import Any


def _series(name: str, labels: dict[str, str]) -> str:
    if not labels:
        return name
    rendered = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
    return f"{name}:{rendered}"


class MetricsCollector:
    """
    In-memory Prometheus-style registry. Tracks counters and histograms.
    Thread-safe. Exposes increment, observe_latency, export_metrics.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # Counters: name -> value, labelled counters: name -> {series -> value}
        self._counters: dict[str, float] = {}
        self._counters_by_labels: dict[str, dict[str, float]] = {}
        # Histograms: series -> list of observed values (for latency)
        self._histograms: dict[str, list[float]] = {}

    def increment(self, name: str, value: float = 1.0, **labels: str) -> None:
        """Increment a counter. Keyword labels (e.g. contenttype=...) make it dimensional."""
        with self._lock:
            if labels:
                series = self._counters_by_labels.setdefault(name, {})
                key = _series(name, labels)
                series[key] = series.get(key, 0) + value
            else:
                self._counters[name] = self._counters.get(name, 0) + value

    def observe_latency(self, name: str, latency_ms: float, **labels: str) -> None:
        """Record a latency observation (histogram-style)."""
        with self._lock:
            self._histograms.setdefault(_series(name, labels), []).append(latency_ms)

    def export_metrics(self) -> dict[str, Any]:
        """Export all metrics as a dict (simulated Prometheus-style)."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_labels": {
                    k: dict(v) for k, v in self._counters_by_labels.items()
                },
                "histograms": {
                    k: {
                        "count": len(v),
                        "sum": sum(v),
                        "values": list(v),
                    }
                    for k, v in self._histograms.items()
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._counters.clear()
            self._counters_by_labels.clear()
            self._histograms.clear()
