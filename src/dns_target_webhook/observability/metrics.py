"""
Prometheus metrics for the DNS target webhook.

This module provides metrics for admission reviews: how many were handled,
how they were decided, how long they took, and how many requests were
rejected before reaching the decision engine.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import CollectorRegistry, Counter, Histogram

from dns_target_webhook.constants import ANNOTATED_KINDS, KIND_LABEL_OTHER

logger = logging.getLogger(__name__)

# Global metrics registry
_metrics_registry: CollectorRegistry | None = None

ADMISSION_REVIEWS_TOTAL = Counter(
    "dns_target_webhook_admission_reviews_total",
    "Total number of admission reviews by object kind and outcome",
    ["kind", "result"],
    registry=None,  # Will be set during initialization
)

ADMISSION_DURATION = Histogram(
    "dns_target_webhook_admission_duration_seconds",
    "Time spent deciding admission reviews",
    ["kind"],
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5],
    registry=None,
)

REJECTED_REQUESTS_TOTAL = Counter(
    "dns_target_webhook_rejected_requests_total",
    "Total number of webhook requests answered with an HTTP error",
    ["reason"],
    registry=None,
)


def kind_label(kind: str) -> str:
    """Collapse kinds outside the annotated set into one label value."""
    return kind if kind in ANNOTATED_KINDS else KIND_LABEL_OTHER


def get_metrics_registry() -> CollectorRegistry:
    """Get or create the global metrics registry."""
    global _metrics_registry

    if _metrics_registry is None:
        _metrics_registry = CollectorRegistry()

        for metric in [
            ADMISSION_REVIEWS_TOTAL,
            ADMISSION_DURATION,
            REJECTED_REQUESTS_TOTAL,
        ]:
            _metrics_registry.register(metric)

    return _metrics_registry


class MetricsCollector:
    """Collects and manages metrics for the webhook."""

    def __init__(self):
        self.registry = get_metrics_registry()

    @contextmanager
    def track_review(self, kind: str) -> Iterator[None]:
        """
        Context manager timing one admission decision.

        Args:
            kind: Object kind of the reviewed object
        """
        start_time = time.perf_counter()
        try:
            yield
        finally:
            ADMISSION_DURATION.labels(kind=kind_label(kind)).observe(
                time.perf_counter() - start_time
            )

    def record_review(self, kind: str, result: str) -> None:
        """Count a decided admission review."""
        ADMISSION_REVIEWS_TOTAL.labels(kind=kind_label(kind), result=result).inc()

    def record_rejection(self, reason: str) -> None:
        """Count a request rejected with an HTTP error status."""
        REJECTED_REQUESTS_TOTAL.labels(reason=reason).inc()


# Global metrics collector instance
metrics_collector = MetricsCollector()
