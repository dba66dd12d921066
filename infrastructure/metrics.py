"""Prometheus metrics for the signal classification service.

Labels carry the classifier name and the detected state so dashboards show
what the service is hearing, not just generic HTTP stats.

Metrics:
    sig_analyses_total             Counter by classifier (emotion/breathing) and state
    sig_analysis_latency_seconds   Histogram of per-request analysis latency
    sig_empty_inputs_total         Requests whose input produced a default result

Usage::

    from infrastructure.metrics import LatencyTimer, record_analysis

    with LatencyTimer() as t:
        result = classifier.process(samples)
    record_analysis(classifier="emotion", state=result.state.value, latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

analyses_total = Counter(
    "sig_analyses_total",
    "Completed analyses by classifier and detected state",
    ["classifier", "state"],
    registry=_REGISTRY,
)

analysis_latency_seconds = Histogram(
    "sig_analysis_latency_seconds",
    "Analysis latency in seconds",
    ["classifier"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
    registry=_REGISTRY,
)

empty_inputs_total = Counter(
    "sig_empty_inputs_total",
    "Inputs that produced a default result (empty or silent)",
    ["classifier"],
    registry=_REGISTRY,
)

logger.info("Prometheus metrics registry initialized")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_analysis(
    *,
    classifier: str,
    state: str,
    latency_seconds: float,
) -> None:
    """Record one completed analysis.

    Args:
        classifier: "emotion" or "breathing".
        state: Detected state value (e.g. "calm", "normal").
        latency_seconds: Wall-clock time spent in the classifier.
    """
    analyses_total.labels(classifier=classifier, state=state).inc()
    analysis_latency_seconds.labels(classifier=classifier).observe(latency_seconds)


def record_empty_input(classifier: str) -> None:
    """Increment the default-result counter for a classifier."""
    empty_inputs_total.labels(classifier=classifier).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = classifier.process(samples)
        record_analysis(classifier="breathing", state="normal", latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        self.elapsed = time.perf_counter() - self._start
