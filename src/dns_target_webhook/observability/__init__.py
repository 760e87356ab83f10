"""
Observability utilities for the DNS target webhook.

This module provides metrics, tracing, and structured logging
capabilities for production monitoring and troubleshooting.
"""

from .logging import setup_structured_logging
from .metrics import get_metrics_registry, metrics_collector
from .tracing import setup_tracing, shutdown_tracing

__all__ = [
    "get_metrics_registry",
    "metrics_collector",
    "setup_structured_logging",
    "setup_tracing",
    "shutdown_tracing",
]
