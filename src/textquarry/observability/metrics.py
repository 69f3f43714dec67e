"""
Defines Prometheus metrics for fetches, strategies and extractions.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, multiple app instances in one
# process) must not raise duplicate registration errors.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race; fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "fetch_latency_seconds": Histogram(
            "textquarry_fetch_latency_seconds",
            "Wall-clock latency of bounded fetches, body download included",
            buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
        ),
        "fetch_responses_total": Counter(
            "textquarry_fetch_responses_total",
            "HTTP responses received by the bounded fetcher",
            ["status_class"],
        ),
        "fetch_failures_total": Counter(
            "textquarry_fetch_failures_total",
            "Fetches that ended without a response",
            ["reason"],
        ),
        "strategy_attempts_total": Counter(
            "textquarry_strategy_attempts_total",
            "Strategy attempts by outcome",
            ["strategy", "outcome"],
        ),
        "extractions_total": Counter(
            "textquarry_extractions_total",
            "Completed extract() calls by outcome",
            ["site_type", "outcome"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def increment(name: str, value: float = 1.0, **labels: str) -> None:
    """Increment a counter metric if it is registered."""
    metric = METRICS.get(name)
    if metric is None:
        return
    if labels:
        metric.labels(**labels).inc(value)
    else:
        metric.inc(value)


def observe(name: str, value: float, **labels: str) -> None:
    """Observe a histogram metric if it is registered."""
    metric = METRICS.get(name)
    if metric is None:
        return
    if labels:
        metric.labels(**labels).observe(value)
    else:
        metric.observe(value)
